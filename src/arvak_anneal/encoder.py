"""Serialize a normalized kernel into a SAPI problem submission."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .exceptions import ConfigurationError, UnboundParameterError, UnsupportedBatchError
from .program import Program
from .schedule import ScheduleTable
from .solvers import Solver

PROBLEM_TYPE = "ising"

# Set from validated fields or from the anneal schedule, never from ``extra``.
RESERVED_PARAMS = frozenset({"num_reads", "annealing_time", "anneal_schedule"})


@dataclass
class SolverParameters:
    """Solver parameters sent with every problem."""

    num_reads: int = 100
    annealing_time: int = 20
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("num_reads", "annealing_time"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        clash = RESERVED_PARAMS.intersection(self.extra)
        if clash:
            raise ConfigurationError(
                f"extra solver parameters may not set {', '.join(sorted(clash))}"
            )

    def to_json(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "num_reads": self.num_reads,
            "annealing_time": self.annealing_time,
        }
        params.update(self.extra)
        return params


def problem_data(program: Program, num_qubits: int) -> str:
    """The ``data`` field: header ``"<qubits> <lines>"`` then one QMI per line."""
    body = program.to_string()
    num_lines = len(program.coupling_terms)
    return f"{num_qubits} {num_lines}\n{body}"


def build_submission(
    programs: Sequence[Program],
    solver: Solver,
    params: Optional[SolverParameters] = None,
    schedule: Optional[ScheduleTable] = None,
) -> list[dict[str, Any]]:
    """Build the single-problem submission list for ``POST /sapi/problems``.

    With a ``schedule`` the params carry ``anneal_schedule`` in place of
    ``annealing_time``.
    """
    if len(programs) != 1:
        raise UnsupportedBatchError(
            f"Exactly one kernel can be submitted per job, got {len(programs)}"
        )
    program = programs[0]
    if not program.is_bound:
        raise UnboundParameterError(program.unbound_symbols[0], program.name)

    solver_params = (params or SolverParameters()).to_json()
    if schedule is not None:
        # The service rejects annealing_time alongside an explicit schedule.
        del solver_params["annealing_time"]
        solver_params["anneal_schedule"] = schedule.as_list()

    return [
        {
            "solver": solver.name,
            "type": PROBLEM_TYPE,
            "data": problem_data(program, solver.num_qubits),
            "params": solver_params,
        }
    ]


def encode_submission(
    programs: Sequence[Program],
    solver: Solver,
    params: Optional[SolverParameters] = None,
    schedule: Optional[ScheduleTable] = None,
) -> str:
    """JSON text of :func:`build_submission`; newlines in ``data`` come out as ``\\n``."""
    return json.dumps(build_submission(programs, solver, params, schedule))
