"""Shared fixtures: a small solver catalog and answer builders."""

import base64

import numpy as np
import pytest

from arvak_anneal.solvers import Solver, SolverRegistry

BASE_URL = "https://fake.sapi.io"


def chimera_cell():
    """One K_{4,4} unit cell: qubits 0-3 couple to 4-7."""
    return [[a, b] for a in range(4) for b in range(4, 8)]


@pytest.fixture
def catalog():
    return [
        {
            "id": "DW_2000Q_VFYC_1 ",
            "description": "fake 2000Q",
            "properties": {
                "num_qubits": 8,
                "couplers": chimera_cell() + [[0, 1], [4, 5]],
                "j_range": [-1.0, 1.0],
                "h_range": [-2.0, 2.0],
            },
        },
        {
            "id": "c4-sw_sample",
            "description": "software sampler without ranges",
            "properties": {
                "num_qubits": 4,
                "couplers": [[0, 1], [1, 2], [2, 3], [0, 3]],
            },
        },
    ]


@pytest.fixture
def registry(catalog):
    return SolverRegistry.from_catalog(catalog)


@pytest.fixture
def solver(registry) -> Solver:
    return registry.get("DW_2000Q_VFYC_1")


def encode_samples(rows, active_count):
    """Pack 0/1 rows MSB first, each padded to a whole byte, as base64."""
    width = ((active_count + 7) // 8) * 8
    bits = np.zeros((len(rows), width), dtype=np.uint8)
    for i, row in enumerate(rows):
        bits[i, : len(row)] = row
    return base64.b64encode(np.packbits(bits.ravel()).tobytes()).decode("ascii")


def completed_body(rows, energies, occurrences, active, job_id="job-1"):
    return {
        "id": job_id,
        "status": "COMPLETED",
        "solver": "DW_2000Q_VFYC_1",
        "type": "ising",
        "answer": {
            "format": "qp",
            "energies": energies,
            "num_occurrences": occurrences,
            "active_variables": active,
            "solutions": encode_samples(rows, len(active)),
        },
    }
