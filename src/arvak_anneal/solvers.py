"""Solver descriptors and the name-keyed solver registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from .exceptions import ConfigurationError
from .graph import HardwareTopology

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Solver:
    """Summary of a remote annealing solver."""

    name: str
    description: str
    topology: HardwareTopology

    @property
    def num_qubits(self) -> int:
        return self.topology.num_qubits

    @classmethod
    def from_json(cls, entry: dict[str, Any]) -> "Solver":
        """Parse one entry of the ``/sapi/solvers/remote`` catalog."""
        try:
            props = entry["properties"]
            name = str(entry["id"]).strip()
            num_qubits = int(props["num_qubits"])
            topology = HardwareTopology.from_edges(
                num_qubits,
                props.get("couplers", []),
                j_range=_range(props.get("j_range")),
                h_range=_range(props.get("h_range")),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Malformed solver descriptor: {exc}") from exc

        return cls(
            name=name,
            description=entry.get("description", ""),
            topology=topology,
        )


def _range(value) -> tuple[float, float] | None:
    if not value:
        return None
    lo, hi = value
    return (float(lo), float(hi))


class SolverRegistry:
    """Read-mostly registry of solvers keyed by name.

    Populated once from the solver catalog; lookups of unknown names are
    configuration errors.
    """

    def __init__(self, solvers: Iterable[Solver] = ()) -> None:
        self._solvers: dict[str, Solver] = {}
        for solver in solvers:
            self._solvers[solver.name] = solver

    @classmethod
    def from_catalog(cls, catalog: list[dict[str, Any]]) -> "SolverRegistry":
        if not isinstance(catalog, list):
            raise ConfigurationError("Solver catalog must be a JSON array")
        registry = cls(Solver.from_json(entry) for entry in catalog)
        logger.info("Loaded %d solver(s): %s", len(registry), ", ".join(registry.names()))
        return registry

    def get(self, name: str) -> Solver:
        try:
            return self._solvers[name]
        except KeyError:
            raise ConfigurationError(f"{name} is not an available solver") from None

    def names(self) -> list[str]:
        return list(self._solvers)

    def __contains__(self, name: object) -> bool:
        return name in self._solvers

    def __iter__(self) -> Iterator[Solver]:
        return iter(self._solvers.values())

    def __len__(self) -> int:
        return len(self._solvers)
