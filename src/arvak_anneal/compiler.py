"""Compile QMI kernel source into :class:`Program` objects.

Source syntax::

    kernel name(x, y) {
        0 0 1.5;        # bias of qubit 0
        0 1 x;          # coupling between qubits 0 and 1
        anneal 10 5 2 reverse;
        other_kernel();
    }

``__qpu__`` is accepted in place of ``kernel`` and typed parameters
(``double x``) are allowed; an ``AcceleratorBuffer`` parameter is ignored.
Comments start with ``#`` or ``//``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .buffer import AnnealBuffer
from .embedding import embed, load_embedding, persist_embedding
from .exceptions import MalformedInstructionError
from .graph import HardwareTopology
from .instructions import Direction
from .program import Program, ProgramBuilder

logger = logging.getLogger(__name__)

_KERNEL_RE = re.compile(
    r"^(?:kernel|__qpu__)\s+(?P<name>[A-Za-z_]\w*)\s*\((?P<params>[^)]*)\)\s*\{$"
)
_CALL_RE = re.compile(r"^(?P<name>[A-Za-z_]\w*)\s*\(\s*\)$")
_COMMENT_RE = re.compile(r"(#|//).*$")


def _strip(line: str) -> str:
    return _COMMENT_RE.sub("", line).strip()


def _parameters(text: str) -> list[str]:
    names = []
    for decl in text.split(","):
        tokens = decl.split()
        if not tokens:
            continue
        if tokens[0] == "AcceleratorBuffer":
            continue
        names.append(tokens[-1])
    return names


def parse(source: str, kernels: Optional[dict[str, Program]] = None) -> list[Program]:
    """Parse every kernel in ``source``.

    Kernels may call any kernel defined earlier in the same source or
    present in ``kernels``. Newly compiled kernels are added to ``kernels``.
    """
    registry = kernels if kernels is not None else {}
    return [program for program, _ in _parse(source, registry)]


def _parse(source: str, registry: dict[str, Program]):
    builder: Optional[ProgramBuilder] = None
    for lineno, raw in enumerate(source.splitlines(), start=1):
        line = _strip(raw)
        if not line:
            continue

        if builder is None:
            match = _KERNEL_RE.match(line)
            if not match:
                raise MalformedInstructionError(
                    f"line {lineno}: expected a kernel declaration, got {line!r}"
                )
            builder = ProgramBuilder(
                match.group("name"), _parameters(match.group("params")), registry
            )
            continue

        for statement in filter(None, (s.strip() for s in line.split(";"))):
            if builder is None:
                raise MalformedInstructionError(
                    f"line {lineno}: statement outside of a kernel: {statement!r}"
                )
            if statement == "}":
                program, graph = builder.finalize()
                registry[program.name] = program
                yield program, graph
                builder = None
                continue
            _statement(builder, statement, lineno)

    if builder is not None:
        raise MalformedInstructionError(f"kernel {builder.name!r} is missing its closing '}}'")


def _statement(builder: ProgramBuilder, statement: str, lineno: int) -> None:
    tokens = statement.split()
    if tokens[0] == "anneal":
        args = tokens[1:]
        if len(args) == 4:
            try:
                direction = Direction(args[3])
            except ValueError:
                raise MalformedInstructionError(
                    f"line {lineno}: unknown anneal direction {args[3]!r}"
                ) from None
            builder.add_anneal(*args[:3], direction=direction)
        elif len(args) == 3:
            builder.add_anneal(*args)
        else:
            raise MalformedInstructionError(
                f"line {lineno}: anneal takes ta tp tq [forward|reverse]: {statement!r}"
            )
        return

    call = _CALL_RE.match(statement)
    if call:
        builder.call(call.group("name"))
        return

    if len(tokens) != 3:
        raise MalformedInstructionError(f"line {lineno}: cannot parse {statement!r}")
    builder.add_coupling(*tokens)


class Compiler:
    """Compiles kernels for one solver topology and embeds each of them.

    Parameters
    ----------
    topology : HardwareTopology
        Target hardware graph.
    algorithm : str, optional
        Embedding algorithm name (registry default when omitted).
    load_embedding_path : str, optional
        Load the embedding from this file instead of computing it.
    persist_embedding_path : str, optional
        Persist each computed embedding to this file.
    """

    def __init__(
        self,
        topology: HardwareTopology,
        algorithm: Optional[str] = None,
        load_embedding_path: Optional[str] = None,
        persist_embedding_path: Optional[str] = None,
    ) -> None:
        self.topology = topology
        self.algorithm = algorithm
        self.load_embedding_path = load_embedding_path
        self.persist_embedding_path = persist_embedding_path
        self.kernels: dict[str, Program] = {}

    def compile(self, source: str, buffer: AnnealBuffer) -> list[Program]:
        programs = []
        for program, graph in _parse(source, self.kernels):
            if self.load_embedding_path:
                embedding = load_embedding(self.load_embedding_path)
            else:
                embedding = embed(graph, self.topology, self.algorithm)
                if self.persist_embedding_path:
                    persist_embedding(embedding, self.persist_embedding_path)
            buffer.set_embedding(embedding, program.name)
            programs.append(program)
            logger.debug("Compiled %r", program)
        return programs
