"""Tests for the submission encoder."""

import json

import pytest

from arvak_anneal.encoder import (
    SolverParameters,
    build_submission,
    encode_submission,
    problem_data,
)
from arvak_anneal.exceptions import (
    ConfigurationError,
    UnboundParameterError,
    UnsupportedBatchError,
)
from arvak_anneal.instructions import AnnealDirective, CouplingTerm
from arvak_anneal.program import Program
from arvak_anneal.schedule import AnnealScheduleGenerator


def ferro():
    return Program(
        "ferro",
        (),
        (CouplingTerm(0, 0, 1.0), CouplingTerm(1, 1, 1.0), CouplingTerm(0, 1, -1.0)),
    )


class TestSolverParameters:
    def test_defaults(self):
        assert SolverParameters().to_json() == {"num_reads": 100, "annealing_time": 20}

    def test_overrides(self):
        params = SolverParameters(num_reads=1000, annealing_time=5, extra={"auto_scale": False})
        assert params.to_json() == {
            "num_reads": 1000,
            "annealing_time": 5,
            "auto_scale": False,
        }

    @pytest.mark.parametrize("kwargs", [{"num_reads": 0}, {"annealing_time": -5}, {"num_reads": "10"}])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            SolverParameters(**kwargs)

    @pytest.mark.parametrize("key", ["num_reads", "annealing_time", "anneal_schedule"])
    def test_extra_cannot_override(self, key):
        with pytest.raises(ConfigurationError, match=key):
            SolverParameters(extra={key: -1})


class TestBuildSubmission:
    def test_problem_data(self):
        assert problem_data(ferro(), 8) == "8 3\n0 0 1.0\n1 1 1.0\n0 1 -1.0"

    def test_payload(self, solver):
        (job,) = build_submission([ferro()], solver)
        assert job["solver"] == "DW_2000Q_VFYC_1"
        assert job["type"] == "ising"
        assert job["data"].startswith("8 3\n")
        assert job["params"] == {"num_reads": 100, "annealing_time": 20}

    def test_batch_rejected(self, solver):
        with pytest.raises(UnsupportedBatchError):
            build_submission([ferro(), ferro()], solver)

    def test_empty_rejected(self, solver):
        with pytest.raises(UnsupportedBatchError):
            build_submission([], solver)

    def test_unbound_rejected(self, solver):
        program = Program("k", ("x",), (CouplingTerm(0, 1, "x"),))
        with pytest.raises(UnboundParameterError):
            build_submission([program], solver)

    def test_schedule_replaces_annealing_time(self, solver):
        table = AnnealScheduleGenerator().generate(AnnealDirective(10.0, 5.0, 2.0))
        (job,) = build_submission([ferro()], solver, schedule=table)
        assert job["params"] == {
            "num_reads": 100,
            "anneal_schedule": [[0.0, 0.0], [5.0, 0.5], [7.0, 0.5], [12.0, 1.0]],
        }

    def test_unbound_anneal_rejected(self, solver):
        program = Program("k", ("ta",), (CouplingTerm(0, 1, 1.0), AnnealDirective("ta", 0.0, 0.0)))
        with pytest.raises(UnboundParameterError, match="ta is an invalid kernel parameter"):
            build_submission([program], solver)


class TestEncodeSubmission:
    def test_newlines_escaped(self, solver):
        text = encode_submission([ferro()], solver, SolverParameters(num_reads=10))
        assert "\n" not in text
        assert "\\n" in text
        decoded = json.loads(text)
        assert decoded[0]["data"] == "8 3\n0 0 1.0\n1 1 1.0\n0 1 -1.0"
        assert decoded[0]["params"]["num_reads"] == 10
