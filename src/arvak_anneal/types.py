"""Shared data types for arvak-anneal."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

COMPLETED = "COMPLETED"
FAILED_STATUSES = ("FAILED", "CANCELLED", "CANCELED", "ABORTED")


@dataclass
class JobStatus:
    """Current status of a submitted problem."""

    job_id: str
    status: str  # PENDING | IN_PROGRESS | COMPLETED | FAILED | CANCELLED
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.status in FAILED_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.is_completed or self.is_failed


@dataclass
class Sample:
    """One distinct measurement returned by the solver."""

    bits: np.ndarray  # uint8, one entry per active variable
    energy: float
    num_occurrences: int

    @property
    def bitstring(self) -> str:
        return "".join(str(int(b)) for b in self.bits)

    def spins(self) -> np.ndarray:
        """Bits mapped to Ising spins (1 -> +1, 0 -> -1)."""
        return 2 * self.bits.astype(np.int8) - 1


@dataclass
class JobResult:
    """Decoded answer of a completed annealing job."""

    samples: list[Sample]
    active_variables: list[int]
    solver: Optional[str] = None
    job_id: Optional[str] = None
    timing: dict[str, Any] = field(default_factory=dict)

    @property
    def num_executions(self) -> int:
        """Total number of reads, i.e. the sum of all occurrence counts."""
        return sum(s.num_occurrences for s in self.samples)

    @property
    def energies(self) -> list[float]:
        return [s.energy for s in self.samples]

    @property
    def num_occurrences(self) -> list[int]:
        return [s.num_occurrences for s in self.samples]

    @property
    def lowest_energy_sample(self) -> Optional[Sample]:
        if not self.samples:
            return None
        return min(self.samples, key=lambda s: s.energy)

    @property
    def lowest_energy(self) -> Optional[float]:
        best = self.lowest_energy_sample
        return best.energy if best is not None else None

    @property
    def most_probable_sample(self) -> Optional[Sample]:
        if not self.samples:
            return None
        return max(self.samples, key=lambda s: s.num_occurrences)

    def measurements(self) -> np.ndarray:
        """All samples as a ``(num_samples, num_active)`` uint8 array."""
        if not self.samples:
            return np.zeros((0, len(self.active_variables)), dtype=np.uint8)
        return np.vstack([s.bits for s in self.samples])

    def probabilities(self) -> dict[str, float]:
        total = self.num_executions
        if total == 0:
            return {}
        return {s.bitstring: s.num_occurrences / total for s in self.samples}
