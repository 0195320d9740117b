"""Annealing instructions: coupling terms and anneal directives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

# A literal value or the name of a kernel parameter.
Value = Union[float, str]


class Direction(str, Enum):
    """Direction of an anneal schedule."""

    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass(frozen=True)
class CouplingTerm:
    """A single QMI line ``i j weight``.

    When ``qubit_a == qubit_b`` the term is the bias of that qubit,
    otherwise it is the coupling strength between the two qubits.
    """

    qubit_a: int
    qubit_b: int
    weight: Value

    @property
    def is_bias(self) -> bool:
        return self.qubit_a == self.qubit_b

    @property
    def is_symbolic(self) -> bool:
        return isinstance(self.weight, str)

    def with_weight(self, weight: Value) -> "CouplingTerm":
        return CouplingTerm(self.qubit_a, self.qubit_b, weight)

    def to_string(self) -> str:
        return f"{self.qubit_a} {self.qubit_b} {self.weight}"


@dataclass(frozen=True)
class AnnealDirective:
    """Anneal schedule descriptor ``anneal ta tp tq [direction]``."""

    ta: Value
    tp: Value
    tq: Value
    direction: Direction = Direction.FORWARD

    @property
    def symbols(self) -> list[str]:
        return [v for v in (self.ta, self.tp, self.tq) if isinstance(v, str)]

    def to_string(self) -> str:
        return f"anneal {self.ta} {self.tp} {self.tq} {self.direction.value}"


Instruction = Union[CouplingTerm, AnnealDirective]


def parse_value(token: str) -> Value:
    """Return ``token`` as a float when it is numeric, else as a symbol."""
    try:
        return float(token)
    except ValueError:
        return token.strip()
