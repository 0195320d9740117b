"""Expand ``anneal ta tp tq direction`` into a piecewise-linear schedule.

The schedule is a list of ``(time, s)`` checkpoints where ``s`` is the
normalized annealing fraction. For a forward anneal:

* ``s`` ramps linearly from 0 at ``t = 0`` to 1 at the end of the ramp,
  which lasts ``ta`` time units;
* at ``t = tp`` (a point on the ramp, ``0 <= tp <= ta``) the ramp pauses
  for ``tq`` time units, holding ``s = tp / ta``;
* the ramp then resumes and reaches ``s = 1`` at ``t = ta + tq``.

A reverse anneal uses the same checkpoints with ``s`` mirrored to
``1 - s``: it starts at 1, pauses at ``1 - tp / ta`` and ends at 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import InvalidScheduleError, UnboundParameterError
from .instructions import AnnealDirective, Direction, Value


@dataclass(frozen=True)
class ScheduleTable:
    """Ordered ``(time, fraction)`` checkpoints."""

    points: tuple[tuple[float, float], ...]
    direction: Direction = Direction.FORWARD

    @property
    def times(self) -> list[float]:
        return [t for t, _ in self.points]

    @property
    def fractions(self) -> list[float]:
        return [s for _, s in self.points]

    @property
    def duration(self) -> float:
        return self.points[-1][0]

    def fraction_at(self, time: float) -> float:
        """Linear interpolation of the annealing fraction at ``time``."""
        if time <= self.points[0][0]:
            return self.points[0][1]
        for (t0, s0), (t1, s1) in zip(self.points, self.points[1:]):
            if t0 <= time <= t1:
                if t1 == t0:
                    return s1
                return s0 + (s1 - s0) * (time - t0) / (t1 - t0)
        return self.points[-1][1]

    def as_list(self) -> list[list[float]]:
        """Wire form, ``[[t, s], ...]``."""
        return [[t, s] for t, s in self.points]

    def to_string(self) -> str:
        return "\n".join(f"{t:g} {s:g}" for t, s in self.points)

    def __str__(self) -> str:
        return self.to_string()


class AnnealScheduleGenerator:
    """Builds :class:`ScheduleTable` objects from anneal directives."""

    def generate(
        self,
        anneal: AnnealDirective,
        bindings: Optional[Mapping[str, float]] = None,
        kernel: str = "anneal",
    ) -> ScheduleTable:
        ta, tp, tq = (_resolve(v, bindings, kernel) for v in (anneal.ta, anneal.tp, anneal.tq))

        if ta <= 0:
            raise InvalidScheduleError(f"anneal time ta must be > 0, got {ta:g}")
        if not 0 <= tp <= ta:
            raise InvalidScheduleError(
                f"pause start tp must lie within [0, {ta:g}], got {tp:g}"
            )
        if tq < 0:
            raise InvalidScheduleError(f"pause duration tq must be >= 0, got {tq:g}")

        pause = tp / ta
        forward = [(0.0, 0.0), (tp, pause), (tp + tq, pause), (ta + tq, 1.0)]

        points: list[tuple[float, float]] = []
        for t, s in forward:
            if anneal.direction is Direction.REVERSE:
                s = 1.0 - s
            if points and points[-1] == (t, s):
                continue
            points.append((t, s))
        return ScheduleTable(tuple(points), anneal.direction)

    def get_as_string(self, table: ScheduleTable) -> str:
        return table.to_string()


def _resolve(value: Value, bindings: Optional[Mapping[str, float]], kernel: str) -> float:
    if not isinstance(value, str):
        return float(value)
    if bindings is None or value not in bindings:
        raise UnboundParameterError(value, kernel)
    return float(bindings[value])
