"""Explicit configuration for an annealing accelerator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .embedding import DEFAULT_ALGORITHM
from .encoder import SolverParameters
from .exceptions import ConfigurationError

DEFAULT_SOLVER = "DW_2000Q_VFYC_1"
DEFAULT_URL = "https://cloud.dwavesys.com"


@dataclass
class AnnealConfig:
    """Already-resolved settings consumed by :class:`AnnealAccelerator`.

    Parameters
    ----------
    api_key : str
        SAPI token.
    url : str
        Base URL of the SAPI service.
    solver_name : str
        Solver to compile for and submit to.
    num_reads, anneal_time : int
        Solver parameters (defaults: 100 reads, 20 time units).
    embedding_algorithm : str
        Name of a registered embedding algorithm.
    load_embedding_path : str, optional
        Skip the embedding search and load this file instead.
    persist_embedding_path : str, optional
        Write each computed embedding to this file.
    poll_interval : float
        Seconds between status requests.
    poll_timeout : float, optional
        Give up waiting after this many seconds (default: wait forever).
    solver_params : dict
        Extra solver parameters passed through verbatim.
    """

    api_key: str
    url: str = DEFAULT_URL
    solver_name: str = DEFAULT_SOLVER
    num_reads: int = 100
    anneal_time: int = 20
    embedding_algorithm: str = DEFAULT_ALGORITHM
    load_embedding_path: Optional[str] = None
    persist_embedding_path: Optional[str] = None
    poll_interval: float = 0.1
    poll_timeout: Optional[float] = None
    solver_params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "The API key is empty; provide it through AnnealConfig(api_key=...)"
            )
        if not self.solver_name:
            raise ConfigurationError("solver_name must not be empty")
        if self.poll_interval < 0:
            raise ConfigurationError(f"poll_interval must be >= 0, got {self.poll_interval}")
        # Validates num_reads / anneal_time.
        self.parameters()

    def parameters(self) -> SolverParameters:
        return SolverParameters(
            num_reads=self.num_reads,
            annealing_time=self.anneal_time,
            extra=dict(self.solver_params),
        )
