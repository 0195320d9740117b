"""Decode the packed ``answer`` of a completed SAPI problem."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

import numpy as np

from .exceptions import DecodeError, RemoteExecutionError
from .types import COMPLETED, JobResult, Sample

logger = logging.getLogger(__name__)


def padded_width(active_count: int) -> int:
    """Bits per sample: ``active_count`` rounded up to a whole byte."""
    return ((active_count + 7) // 8) * 8


def unpack_solutions(encoded: str, active_count: int, num_samples: int) -> np.ndarray:
    """Turn the base64 ``solutions`` field into a ``(num_samples, active_count)`` array.

    Every byte is expanded MSB first; each sample occupies
    :func:`padded_width` bits of which the trailing padding is dropped.
    """
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise DecodeError(f"solutions is not valid base64: {exc}") from exc

    bits = np.unpackbits(np.frombuffer(raw, dtype=np.uint8))
    width = padded_width(active_count)
    expected = width * num_samples
    if bits.size != expected:
        raise DecodeError(
            f"bit stream holds {bits.size} bits, expected {expected} "
            f"({num_samples} samples x {width} bits)"
        )
    if num_samples == 0:
        return np.zeros((0, active_count), dtype=np.uint8)
    return bits.reshape(num_samples, width)[:, :active_count]


def decode_answer(body: dict[str, Any], solver: str | None = None) -> JobResult:
    """Decode a problem status body with ``status == COMPLETED``.

    Raises
    ------
    RemoteExecutionError
        If the body does not describe a completed problem.
    DecodeError
        If the answer is missing, truncated or inconsistent.
    """
    job_id = str(body.get("id", ""))
    status = body.get("status")
    if status != COMPLETED:
        raise RemoteExecutionError(job_id, str(status), body)

    try:
        answer = body["answer"]
        energies = [float(e) for e in answer["energies"]]
        occurrences = [int(n) for n in answer["num_occurrences"]]
        active = [int(v) for v in answer["active_variables"]]
        encoded = answer["solutions"]
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"malformed answer: {exc!r}") from exc

    if len(occurrences) != len(energies):
        raise DecodeError(
            f"{len(energies)} energies but {len(occurrences)} occurrence counts"
        )
    if any(n <= 0 for n in occurrences):
        raise DecodeError(f"occurrence counts must be positive, got {occurrences}")
    if energies and not active:
        raise DecodeError("answer has samples but no active variables")

    matrix = unpack_solutions(encoded, len(active), len(energies))
    samples = [
        Sample(bits=row.copy(), energy=energy, num_occurrences=count)
        for row, energy, count in zip(matrix, energies, occurrences)
    ]
    result = JobResult(
        samples=samples,
        active_variables=active,
        solver=solver or body.get("solver"),
        job_id=job_id or None,
        timing=dict(answer.get("timing") or {}),
    )

    if samples:
        logger.info(
            "Decoded %d samples over %d active variables (%d reads); lowest energy %g",
            len(samples), len(active), result.num_executions, result.lowest_energy,
        )
    return result
