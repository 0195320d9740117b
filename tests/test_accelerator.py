"""End-to-end tests for AnnealAccelerator against a mocked SAPI service."""

import json

import pytest

from arvak_anneal import AnnealAccelerator, AnnealConfig
from arvak_anneal.exceptions import (
    ConfigurationError,
    RemoteExecutionError,
    UnboundParameterError,
    UnsupportedBatchError,
)

from conftest import BASE_URL, completed_body

SOLVERS_URL = f"{BASE_URL}/sapi/solvers/remote"
PROBLEMS_URL = f"{BASE_URL}/sapi/problems"
STATUS_URL = f"{PROBLEMS_URL}/job-1"

SOURCE = """
kernel ferro(j) {
    0 0 1.0;
    1 1 1.0;
    0 1 j;
    anneal 10 10 10 forward;
}
"""


def make_config(**kwargs):
    kwargs.setdefault("api_key", "test-key")
    kwargs.setdefault("url", BASE_URL)
    kwargs.setdefault("embedding_algorithm", "identity")
    kwargs.setdefault("poll_interval", 0)
    return AnnealConfig(**kwargs)


@pytest.fixture
def accelerator(httpx_mock, catalog):
    httpx_mock.add_response(url=SOLVERS_URL, json=catalog)
    acc = AnnealAccelerator(make_config())
    acc.initialize()
    yield acc
    acc.close()


class TestConfig:
    def test_empty_api_key(self):
        with pytest.raises(ConfigurationError, match="API key"):
            AnnealConfig(api_key="")

    def test_invalid_reads(self):
        with pytest.raises(ConfigurationError, match="num_reads"):
            AnnealConfig(api_key="k", num_reads=0)

    def test_defaults(self):
        config = AnnealConfig(api_key="k")
        assert config.solver_name == "DW_2000Q_VFYC_1"
        assert config.parameters().to_json() == {"num_reads": 100, "annealing_time": 20}


class TestSetup:
    def test_solver_selected(self, accelerator):
        assert accelerator.solver.num_qubits == 8
        assert accelerator.connectivity().j_range == (-1.0, 1.0)
        assert sorted(accelerator.solvers.names()) == ["DW_2000Q_VFYC_1", "c4-sw_sample"]

    def test_unknown_solver(self, httpx_mock, catalog):
        httpx_mock.add_response(url=SOLVERS_URL, json=catalog)
        acc = AnnealAccelerator(make_config(solver_name="Advantage_system9.9"))
        acc.initialize()
        with pytest.raises(ConfigurationError, match="not an available solver"):
            acc.create_buffer("q")

    def test_not_initialized(self):
        acc = AnnealAccelerator(make_config())
        with pytest.raises(ConfigurationError, match="initialize"):
            acc.solver

    def test_buffer_sizes(self, accelerator):
        assert accelerator.create_buffer("q").size == 8
        assert accelerator.create_buffer("q", 3).size == 3
        with pytest.raises(ConfigurationError, match="buffer size"):
            accelerator.create_buffer("q", 0)


class TestExecute:
    def _mock_job(self, httpx_mock, final_status="COMPLETED"):
        httpx_mock.add_response(
            method="POST", url=PROBLEMS_URL, json=[{"id": "job-1", "status": "PENDING"}]
        )
        httpx_mock.add_response(url=STATUS_URL, json={"id": "job-1", "status": "PENDING"})
        httpx_mock.add_response(url=STATUS_URL, json={"id": "job-1", "status": "PENDING"})
        if final_status == "COMPLETED":
            body = completed_body(
                rows=[[1, 1], [0, 0]],
                energies=[-3.0, -1.0],
                occurrences=[60, 40],
                active=[0, 1],
            )
        else:
            body = {"id": "job-1", "status": final_status}
        httpx_mock.add_response(url=STATUS_URL, json=body)

    def test_full_pipeline(self, accelerator, httpx_mock):
        self._mock_job(httpx_mock)
        buffer = accelerator.create_buffer("q")
        programs = accelerator.compile(SOURCE, buffer)
        assert dict(buffer.embedding) == {0: (0,), 1: (1,)}

        result = accelerator.execute(buffer, programs, bindings={"j": -2.0})

        submitted = json.loads(httpx_mock.get_request(method="POST").content)
        assert len(submitted) == 1
        job = submitted[0]
        assert job["solver"] == "DW_2000Q_VFYC_1"
        assert job["type"] == "ising"
        # Coupling -2.0 exceeds j_range [-1, 1] and is divided by 2.
        assert job["data"] == "8 3\n0 0 1.0\n1 1 1.0\n0 1 -1.0"
        assert job["params"] == {
            "num_reads": 100,
            "anneal_schedule": [[0.0, 0.0], [10.0, 1.0], [20.0, 1.0]],
        }

        assert len(httpx_mock.get_requests(url=STATUS_URL)) == 3
        assert result.lowest_energy == -3.0
        assert result.num_executions == 100
        assert buffer.result is result
        assert buffer.schedule.fractions == [0.0, 1.0, 1.0]

    def test_missing_binding(self, accelerator):
        buffer = accelerator.create_buffer("q")
        programs = accelerator.compile(SOURCE, buffer)
        with pytest.raises(UnboundParameterError):
            accelerator.execute(buffer, programs)

    def test_batch_rejected(self, accelerator):
        buffer = accelerator.create_buffer("q")
        programs = accelerator.compile(SOURCE, buffer)
        with pytest.raises(UnsupportedBatchError):
            accelerator.execute(buffer, programs * 2, bindings={"j": 1.0})

    def test_remote_failure_leaves_buffer_empty(self, accelerator, httpx_mock):
        self._mock_job(httpx_mock, final_status="FAILED")
        buffer = accelerator.create_buffer("q")
        programs = accelerator.compile(SOURCE, buffer)
        with pytest.raises(RemoteExecutionError):
            accelerator.execute(buffer, programs, bindings={"j": 0.5})
        assert not buffer.has_result

    def test_embedding_follows_executed_kernel(self, accelerator, httpx_mock):
        self._mock_job(httpx_mock)
        source = "kernel bias() {\n 0 0 1.0;\n}\nkernel ferro() {\n 0 1 -1.0;\n}\n"
        buffer = accelerator.create_buffer("q")
        bias, ferro = accelerator.compile(source, buffer)
        assert dict(buffer.embeddings["bias"]) == {0: (0,)}
        assert dict(buffer.embeddings["ferro"]) == {0: (0,), 1: (1,)}
        assert buffer.embedding == buffer.embeddings["ferro"]

        accelerator.execute(buffer, [bias])
        assert buffer.embedding == buffer.embeddings["bias"]
