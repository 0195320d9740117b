"""High-level facade: compile, submit and decode annealing kernels."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from .buffer import AnnealBuffer
from .client import SapiClient
from .compiler import Compiler
from .config import AnnealConfig
from .decoder import decode_answer
from .encoder import encode_submission
from .exceptions import ConfigurationError, UnsupportedBatchError
from .graph import HardwareTopology
from .normalize import normalize
from .program import Program
from .schedule import AnnealScheduleGenerator
from .solvers import Solver, SolverRegistry
from .types import JobResult

logger = logging.getLogger(__name__)


class AnnealAccelerator:
    """Runs Ising kernels on a remote annealer.

    Parameters
    ----------
    config : AnnealConfig
        Credentials, solver selection and solver parameters.
    client : SapiClient, optional
        Pre-built client (a new one is created from ``config`` otherwise).

    Example
    -------
    >>> acc = AnnealAccelerator(AnnealConfig(api_key="..."))
    >>> acc.initialize()
    >>> buf = acc.create_buffer("q")
    >>> programs = acc.compile("kernel k() {\\n 0 0 1.0;\\n 0 1 -1.0;\\n}", buf)
    >>> result = acc.execute(buf, programs)
    >>> result.lowest_energy
    """

    def __init__(self, config: AnnealConfig, client: Optional[SapiClient] = None) -> None:
        self.config = config
        self._client = client or SapiClient(api_key=config.api_key, base_url=config.url)
        self._solvers: Optional[SolverRegistry] = None
        self._compiler: Optional[Compiler] = None
        self._scheduler = AnnealScheduleGenerator()

    # ── Setup ──────────────────────────────────────────────────────────

    def initialize(self) -> SolverRegistry:
        """Fetch the solver catalog. Call once before anything else."""
        self._solvers = SolverRegistry.from_catalog(self._client.list_solvers())
        return self._solvers

    @property
    def solvers(self) -> SolverRegistry:
        if self._solvers is None:
            raise ConfigurationError("Accelerator is not initialized; call initialize() first")
        return self._solvers

    @property
    def solver(self) -> Solver:
        return self.solvers.get(self.config.solver_name)

    def connectivity(self) -> HardwareTopology:
        return self.solver.topology

    def create_buffer(self, name: str, size: Optional[int] = None) -> AnnealBuffer:
        """Buffer sized to the selected solver unless ``size`` is given."""
        if size is None:
            size = self.solver.num_qubits
        return AnnealBuffer(name, size)

    # ── Compile ────────────────────────────────────────────────────────

    @property
    def compiler(self) -> Compiler:
        if self._compiler is None:
            self._compiler = Compiler(
                self.connectivity(),
                algorithm=self.config.embedding_algorithm,
                load_embedding_path=self.config.load_embedding_path,
                persist_embedding_path=self.config.persist_embedding_path,
            )
        return self._compiler

    def compile(self, source: str, buffer: AnnealBuffer) -> list[Program]:
        return self.compiler.compile(source, buffer)

    # ── Execute ────────────────────────────────────────────────────────

    def execute(
        self,
        buffer: AnnealBuffer,
        programs: Sequence[Program],
        bindings: Optional[Mapping[str, float]] = None,
    ) -> JobResult:
        """Submit one kernel, block until it completes and decode the answer.

        The decoded result is stored on ``buffer`` and returned.
        """
        if len(programs) != 1:
            raise UnsupportedBatchError(
                f"Exactly one kernel can be launched at a time, got {len(programs)}"
            )
        solver = self.solver
        program = programs[0]
        if bindings:
            program = program.bind(bindings)
        program = normalize(program, solver.topology)

        schedule = None
        if program.anneal is not None:
            schedule = self._scheduler.generate(program.anneal, bindings, kernel=program.name)
            logger.debug("Anneal schedule for %r:\n%s", program.name, schedule.to_string())

        payload = encode_submission([program], solver, self.config.parameters(), schedule)
        body = self._client.run(
            payload,
            poll_interval=self.config.poll_interval,
            timeout=self.config.poll_timeout,
        )
        result = decode_answer(body, solver=solver.name)

        if program.name in buffer.embeddings:
            buffer.set_embedding(buffer.embeddings[program.name], program.name)
        buffer.schedule = schedule
        buffer.set_result(result)
        return result

    def close(self) -> None:
        self._client.close()
