"""Tests for SapiClient with mocked HTTP responses."""

import json

import httpx
import pytest

from arvak_anneal.client import SapiClient
from arvak_anneal.types import JobStatus
from arvak_anneal.exceptions import (
    ConfigurationError,
    JobTimeoutError,
    RemoteExecutionError,
    TransportError,
)

from conftest import BASE_URL

STATUS_URL = f"{BASE_URL}/sapi/problems/job-1"


@pytest.fixture
def client(httpx_mock):
    """Create a client pointing at a fake URL."""
    return SapiClient(api_key="test-key", base_url=BASE_URL)


class TestConstruction:
    @pytest.mark.parametrize("key", ["", "   "])
    def test_empty_key(self, key):
        with pytest.raises(ConfigurationError, match="API key"):
            SapiClient(api_key=key)


class TestListSolvers:
    def test_list_solvers(self, client, httpx_mock, catalog):
        httpx_mock.add_response(url=f"{BASE_URL}/sapi/solvers/remote", json=catalog)
        solvers = client.list_solvers()
        assert [s["id"] for s in solvers] == ["DW_2000Q_VFYC_1 ", "c4-sw_sample"]

    def test_headers_sent(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{BASE_URL}/sapi/solvers/remote", json=[])
        client.list_solvers()
        request = httpx_mock.get_request()
        assert request.headers["x-auth-token"] == "test-key"
        assert request.headers["content-type"] == "application/json"

    def test_not_a_list(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{BASE_URL}/sapi/solvers/remote", json={"oops": 1})
        with pytest.raises(TransportError):
            client.list_solvers()


class TestSubmit:
    def test_submit(self, client, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=f"{BASE_URL}/sapi/problems",
            json=[{"id": "job-1", "status": "PENDING"}],
        )
        payload = json.dumps([{"solver": "s", "type": "ising", "data": "2 1\n0 1 1.0"}])
        assert client.submit(payload) == "job-1"
        request = httpx_mock.get_request()
        assert json.loads(request.content)[0]["data"] == "2 1\n0 1 1.0"

    def test_submit_without_id(self, client, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{BASE_URL}/sapi/problems", json=[])
        with pytest.raises(TransportError, match="no job id"):
            client.submit("[]")


class TestJobStatus:
    @pytest.mark.parametrize(
        "status, completed, failed",
        [
            ("PENDING", False, False),
            ("IN_PROGRESS", False, False),
            ("COMPLETED", True, False),
            ("FAILED", False, True),
            ("CANCELED", False, True),
        ],
    )
    def test_terminal_states(self, status, completed, failed):
        st = JobStatus("job-1", status)
        assert st.is_completed is completed
        assert st.is_failed is failed
        assert st.is_terminal is (completed or failed)


class TestWait:
    def test_pending_twice_then_completed(self, client, httpx_mock):
        httpx_mock.add_response(url=STATUS_URL, json={"id": "job-1", "status": "PENDING"})
        httpx_mock.add_response(url=STATUS_URL, json={"id": "job-1", "status": "IN_PROGRESS"})
        httpx_mock.add_response(
            url=STATUS_URL, json={"id": "job-1", "status": "COMPLETED", "answer": {}}
        )
        body = client.wait("job-1", poll_interval=0)
        assert body["status"] == "COMPLETED"
        assert len(httpx_mock.get_requests(url=STATUS_URL)) == 3

    def test_failed(self, client, httpx_mock):
        httpx_mock.add_response(
            url=STATUS_URL,
            json={"id": "job-1", "status": "FAILED", "error_message": "bad problem"},
        )
        with pytest.raises(RemoteExecutionError) as exc_info:
            client.wait("job-1", poll_interval=0)
        assert exc_info.value.status == "FAILED"
        assert exc_info.value.raw["error_message"] == "bad problem"

    def test_cancelled(self, client, httpx_mock):
        httpx_mock.add_response(url=STATUS_URL, json={"id": "job-1", "status": "CANCELLED"})
        with pytest.raises(RemoteExecutionError, match="CANCELLED"):
            client.wait("job-1", poll_interval=0)

    def test_timeout(self, client, httpx_mock):
        httpx_mock.add_response(url=STATUS_URL, json={"id": "job-1", "status": "PENDING"})
        with pytest.raises(JobTimeoutError):
            client.wait("job-1", poll_interval=0, timeout=-1)

    def test_transport_failure_not_retried(self, client, httpx_mock):
        httpx_mock.add_response(url=STATUS_URL, json={"id": "job-1", "status": "PENDING"})
        httpx_mock.add_exception(httpx.ConnectError("connection refused"), url=STATUS_URL)
        with pytest.raises(TransportError, match="connection refused"):
            client.wait("job-1", poll_interval=0)
        assert len(httpx_mock.get_requests(url=STATUS_URL)) == 2


class TestErrors:
    def test_http_error(self, client, httpx_mock):
        httpx_mock.add_response(
            url=STATUS_URL, json={"error_msg": "unauthorized"}, status_code=401
        )
        with pytest.raises(TransportError) as exc_info:
            client.status("job-1")
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "unauthorized"

    def test_invalid_json(self, client, httpx_mock):
        httpx_mock.add_response(url=STATUS_URL, text="<html>")
        with pytest.raises(TransportError, match="Invalid JSON"):
            client.status("job-1")
