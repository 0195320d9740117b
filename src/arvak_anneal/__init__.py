"""arvak-anneal — compile and run Ising kernels on a remote quantum annealer.

Pure-Python package. Kernels are compiled into an interaction graph,
embedded onto the solver's hardware graph, normalized into the solver's
weight ranges, submitted over HTTP and decoded into per-sample
measurements.

Example
-------
>>> import arvak_anneal as aa
>>> acc = aa.AnnealAccelerator(aa.AnnealConfig(api_key="..."))
>>> acc.initialize()
>>> buf = acc.create_buffer("q")
>>> programs = acc.compile('''
... kernel ferro() {
...     0 0 1.0;
...     1 1 1.0;
...     0 1 -1.0;
... }
... ''', buf)
>>> result = acc.execute(buf, programs)
>>> result.lowest_energy_sample.bitstring
"""

from .accelerator import AnnealAccelerator
from .buffer import AnnealBuffer
from .client import SapiClient
from .compiler import Compiler, parse
from .config import AnnealConfig
from .decoder import decode_answer, padded_width, unpack_solutions
from .embedding import (
    Embedding,
    EmbeddingAlgorithm,
    EmbeddingRegistry,
    IdentityEmbedding,
    MinorminerEmbedding,
    embed,
    load_embedding,
    persist_embedding,
)
from .encoder import SolverParameters, build_submission, encode_submission
from .exceptions import (
    AnnealError,
    CompileError,
    ConfigurationError,
    DecodeError,
    DuplicateAnnealError,
    InvalidScheduleError,
    JobTimeoutError,
    MalformedInstructionError,
    RemoteExecutionError,
    TransportError,
    UnboundParameterError,
    UndefinedKernelError,
    UnsupportedBatchError,
)
from .graph import HardwareTopology, InteractionGraph
from .instructions import AnnealDirective, CouplingTerm, Direction, Instruction
from .normalize import normalize
from .program import Program, ProgramBuilder
from .schedule import AnnealScheduleGenerator, ScheduleTable
from .solvers import Solver, SolverRegistry
from .types import JobResult, JobStatus, Sample

__all__ = [
    # Facade
    "AnnealAccelerator",
    "AnnealConfig",
    "AnnealBuffer",
    # Program model
    "CouplingTerm",
    "AnnealDirective",
    "Direction",
    "Instruction",
    "Program",
    "ProgramBuilder",
    "Compiler",
    "parse",
    # Graphs
    "InteractionGraph",
    "HardwareTopology",
    "Solver",
    "SolverRegistry",
    # Embedding
    "Embedding",
    "EmbeddingAlgorithm",
    "EmbeddingRegistry",
    "MinorminerEmbedding",
    "IdentityEmbedding",
    "embed",
    "load_embedding",
    "persist_embedding",
    # Pipeline
    "normalize",
    "SolverParameters",
    "build_submission",
    "encode_submission",
    "SapiClient",
    "decode_answer",
    "unpack_solutions",
    "padded_width",
    "AnnealScheduleGenerator",
    "ScheduleTable",
    # Types
    "JobResult",
    "JobStatus",
    "Sample",
    # Exceptions
    "AnnealError",
    "ConfigurationError",
    "CompileError",
    "UnboundParameterError",
    "UndefinedKernelError",
    "DuplicateAnnealError",
    "MalformedInstructionError",
    "InvalidScheduleError",
    "TransportError",
    "RemoteExecutionError",
    "JobTimeoutError",
    "DecodeError",
    "UnsupportedBatchError",
]
