"""Annealing kernels and the builder that assembles them statement by statement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .exceptions import (
    DuplicateAnnealError,
    MalformedInstructionError,
    UnboundParameterError,
    UndefinedKernelError,
)
from .graph import InteractionGraph
from .instructions import (
    AnnealDirective,
    CouplingTerm,
    Direction,
    Instruction,
    Value,
    parse_value,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Program:
    """A finalized annealing kernel.

    Parameters
    ----------
    name : str
        Kernel name.
    parameters : tuple[str, ...]
        Declared parameter names, in order.
    instructions : tuple[Instruction, ...]
        Coupling terms and at most one anneal directive. Calls to other
        kernels are already inlined.
    calls : tuple[str, ...]
        Names of the kernels inlined into this one.
    """

    name: str
    parameters: tuple[str, ...] = ()
    instructions: tuple[Instruction, ...] = ()
    calls: tuple[str, ...] = ()

    @property
    def coupling_terms(self) -> list[CouplingTerm]:
        return [i for i in self.instructions if isinstance(i, CouplingTerm)]

    @property
    def anneal(self) -> Optional[AnnealDirective]:
        for inst in self.instructions:
            if isinstance(inst, AnnealDirective):
                return inst
        return None

    @property
    def max_bit_index(self) -> int:
        terms = self.coupling_terms
        if not terms:
            return 0
        return max(max(t.qubit_a, t.qubit_b) for t in terms)

    @property
    def unbound_symbols(self) -> list[str]:
        """Symbols still awaiting a value, in instruction order."""
        symbols: list[str] = []
        for inst in self.instructions:
            if isinstance(inst, CouplingTerm):
                if inst.is_symbolic:
                    symbols.append(inst.weight)
            else:
                symbols.extend(inst.symbols)
        return symbols

    @property
    def is_bound(self) -> bool:
        return not self.unbound_symbols

    def couplings(self) -> list[float]:
        return [t.weight for t in self.coupling_terms if not t.is_bias and not t.is_symbolic]

    def biases(self) -> list[float]:
        return [t.weight for t in self.coupling_terms if t.is_bias and not t.is_symbolic]

    def graph(self) -> InteractionGraph:
        return InteractionGraph.from_program(self)

    def bind(self, values: Mapping[str, float]) -> "Program":
        """Return a copy with every symbolic value replaced by a number.

        Raises
        ------
        UnboundParameterError
            If ``values`` names something that is not a declared parameter,
            or a symbol used by the kernel has no value.
        """
        for name in values:
            if name not in self.parameters:
                raise UnboundParameterError(name, self.name)

        def resolve(value: Value) -> float:
            if not isinstance(value, str):
                return value
            if value not in values:
                raise UnboundParameterError(value, self.name)
            return float(values[value])

        bound: list[Instruction] = []
        for inst in self.instructions:
            if isinstance(inst, CouplingTerm):
                bound.append(inst.with_weight(resolve(inst.weight)))
            else:
                bound.append(
                    AnnealDirective(
                        resolve(inst.ta), resolve(inst.tp), resolve(inst.tq),
                        inst.direction,
                    )
                )
        return Program(self.name, self.parameters, tuple(bound), self.calls)

    def with_terms(self, terms: Sequence[CouplingTerm]) -> "Program":
        """Return a copy whose coupling terms are replaced by ``terms``."""
        others = [i for i in self.instructions if not isinstance(i, CouplingTerm)]
        return Program(self.name, self.parameters, tuple(terms) + tuple(others), self.calls)

    def to_string(self) -> str:
        """QMI lines, one ``i j weight`` per coupling term."""
        return "\n".join(t.to_string() for t in self.coupling_terms)

    def __repr__(self) -> str:
        return (
            f"Program(name={self.name!r}, parameters={list(self.parameters)}, "
            f"terms={len(self.coupling_terms)}, anneal={self.anneal is not None})"
        )


class ProgramBuilder:
    """Collects statements for one kernel and finalizes it.

    Parameters
    ----------
    name : str
        Kernel name.
    parameters : sequence of str
        Declared parameter names.
    kernels : mapping of str to Program, optional
        Already compiled kernels that may be called from this one.
    """

    def __init__(
        self,
        name: str,
        parameters: Sequence[str] = (),
        kernels: Optional[Mapping[str, Program]] = None,
    ) -> None:
        self.name = name
        self.parameters = tuple(parameters)
        self._kernels = kernels if kernels is not None else {}
        self._instructions: list[Instruction] = []
        self._calls: list[str] = []
        self._found_anneal = False
        self.max_bit_idx = 0

    def add_coupling(self, qubit_a, qubit_b, weight) -> CouplingTerm:
        """Append a QMI term. Qubit tokens must be integers."""
        try:
            a = _parse_index(qubit_a)
            b = _parse_index(qubit_b)
        except ValueError as exc:
            raise MalformedInstructionError(
                f"Invalid qubit indices: {qubit_a} {qubit_b} {weight}"
            ) from exc

        value = parse_value(weight) if isinstance(weight, str) else float(weight)
        self._check_symbol(value)

        self.max_bit_idx = max(self.max_bit_idx, a, b)
        term = CouplingTerm(a, b, value)
        self._instructions.append(term)
        return term

    def add_anneal(self, ta, tp, tq, direction=Direction.FORWARD) -> AnnealDirective:
        if self._found_anneal:
            raise DuplicateAnnealError(
                f"Kernel {self.name!r}: you can only provide one anneal instruction"
            )
        values = [parse_value(v) if isinstance(v, str) else float(v) for v in (ta, tp, tq)]
        for v in values:
            self._check_symbol(v)
        anneal = AnnealDirective(*values, direction=Direction(direction))
        self._instructions.append(anneal)
        self._found_anneal = True
        return anneal

    def call(self, name: str) -> None:
        """Inline the instructions of a previously compiled kernel."""
        if name not in self._kernels:
            raise UndefinedKernelError(name)
        callee = self._kernels[name]
        for inst in callee.instructions:
            if isinstance(inst, AnnealDirective):
                self.add_anneal(inst.ta, inst.tp, inst.tq, inst.direction)
            else:
                self._check_symbol(inst.weight)
                self.max_bit_idx = max(self.max_bit_idx, inst.qubit_a, inst.qubit_b)
                self._instructions.append(inst)
        self._calls.append(name)

    def finalize(self) -> tuple[Program, InteractionGraph]:
        """Freeze the kernel and build its interaction graph."""
        program = Program(
            name=self.name,
            parameters=self.parameters,
            instructions=tuple(self._instructions),
            calls=tuple(self._calls),
        )
        graph = InteractionGraph.from_program(program)
        logger.debug("Finalized %r with %d vertices", program, graph.num_vertices)
        return program, graph

    def _check_symbol(self, value: Value) -> None:
        if isinstance(value, str) and value not in self.parameters:
            raise UnboundParameterError(value, self.name)


def _parse_index(token) -> int:
    if isinstance(token, bool):
        raise ValueError(token)
    if isinstance(token, int):
        index = token
    else:
        index = int(str(token).strip())
    if index < 0:
        raise ValueError(token)
    return index
