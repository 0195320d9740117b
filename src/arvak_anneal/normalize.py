"""Rescale QMI weights into the ranges a solver accepts."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .exceptions import UnboundParameterError
from .graph import HardwareTopology, Range
from .program import Program

logger = logging.getLogger(__name__)


def divisor_for(weights: Sequence[float], bounds: Optional[Range]) -> Optional[float]:
    """Return the divisor that brings ``weights`` into ``bounds``.

    ``None`` means no rescaling is needed: the range is unknown, the weights
    already fit, or every weight is zero.
    """
    if bounds is None or not weights:
        return None
    lo, hi = min(weights), max(weights)
    if lo >= bounds[0] and hi <= bounds[1]:
        return None
    divisor = max(abs(lo), abs(hi))
    if divisor == 0.0:
        return None
    return divisor


def normalize(program: Program, topology: HardwareTopology) -> Program:
    """Return ``program`` with couplings scaled into ``j_range`` and biases into ``h_range``.

    Couplings and biases are rescaled independently, each by the largest
    absolute value in its own group. A group that already fits its range is
    left untouched, so normalizing twice is a no-op.
    """
    if not program.is_bound:
        raise UnboundParameterError(program.unbound_symbols[0], program.name)

    j_div = divisor_for(program.couplings(), topology.j_range)
    h_div = divisor_for(program.biases(), topology.h_range)
    if j_div is None and h_div is None:
        return program

    if j_div is not None:
        logger.warning(
            "Coupling weights of %r exceed j_range %s; dividing by %g",
            program.name, topology.j_range, j_div,
        )
    if h_div is not None:
        logger.warning(
            "Bias weights of %r exceed h_range %s; dividing by %g",
            program.name, topology.h_range, h_div,
        )

    terms = []
    for term in program.coupling_terms:
        divisor = h_div if term.is_bias else j_div
        terms.append(term if divisor is None else term.with_weight(term.weight / divisor))
    return program.with_terms(terms)
