"""Error hierarchy for arvak-anneal."""

from __future__ import annotations


class AnnealError(Exception):
    """Base exception for all arvak-anneal errors."""


class ConfigurationError(AnnealError):
    """Invalid or incomplete configuration (unknown solver, empty key, ...)."""


class CompileError(AnnealError):
    """An annealing program could not be compiled."""


class UnboundParameterError(CompileError):
    """A symbolic value does not name a declared kernel parameter."""

    def __init__(self, name: str, kernel: str) -> None:
        self.name = name
        self.kernel = kernel
        super().__init__(
            f"{name} is an invalid kernel parameter "
            f"(does not exist in the argument list of {kernel!r})"
        )


class UndefinedKernelError(CompileError):
    """A kernel call refers to a kernel that has not been compiled."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tried calling an undefined kernel: {name!r}")


class DuplicateAnnealError(CompileError):
    """A kernel declares more than one anneal instruction."""


class MalformedInstructionError(CompileError):
    """A statement could not be parsed into an instruction."""


class InvalidScheduleError(CompileError):
    """Anneal schedule times are out of range."""


class TransportError(AnnealError):
    """The HTTP request to the solver API failed."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            super().__init__(detail)
        else:
            super().__init__(f"SAPI error {status_code}: {detail}")


class RemoteExecutionError(AnnealError):
    """The remote job reached a terminal status other than COMPLETED."""

    def __init__(self, job_id: str, status: str, raw: dict | None = None) -> None:
        self.job_id = job_id
        self.status = status
        self.raw = raw or {}
        super().__init__(f"Job {job_id} finished with status {status}")


class JobTimeoutError(AnnealError):
    """Timed out waiting for a job to complete."""


class DecodeError(AnnealError):
    """The solver answer could not be decoded."""


class UnsupportedBatchError(AnnealError):
    """More than one kernel was submitted in a single call."""
