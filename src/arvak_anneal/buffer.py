"""Execution buffer that carries one job's embedding, schedule and results."""

from __future__ import annotations

from typing import Optional

from .embedding import Embedding
from .exceptions import ConfigurationError
from .schedule import ScheduleTable
from .types import JobResult


class AnnealBuffer:
    """Holds everything a caller needs to interpret one annealing job.

    The embedding lets callers map hardware-qubit measurements back to
    logical variables. When a source defines several kernels each one's
    embedding is kept in ``embeddings``; ``embedding`` is the most recently
    compiled or executed one. The result is only set once decoding succeeded.
    """

    def __init__(self, name: str, size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ConfigurationError(f"Invalid buffer size: {size!r}")
        self.name = name
        self.size = size
        self.embedding: Optional[Embedding] = None
        self.embeddings: dict[str, Embedding] = {}
        self.schedule: Optional[ScheduleTable] = None
        self._result: Optional[JobResult] = None

    @property
    def result(self) -> Optional[JobResult]:
        return self._result

    def set_embedding(self, embedding: Embedding, kernel: Optional[str] = None) -> None:
        self.embedding = embedding
        if kernel is not None:
            self.embeddings[kernel] = embedding

    def set_result(self, result: JobResult) -> None:
        self._result = result

    @property
    def has_result(self) -> bool:
        return self._result is not None

    def __repr__(self) -> str:
        return (
            f"AnnealBuffer(name={self.name!r}, size={self.size}, "
            f"embedded={self.embedding is not None}, "
            f"executed={self._result is not None})"
        )
