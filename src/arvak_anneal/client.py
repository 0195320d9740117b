"""REST client for the SAPI problem submission endpoints."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from .exceptions import (
    ConfigurationError,
    JobTimeoutError,
    RemoteExecutionError,
    TransportError,
)
from .types import JobStatus

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "https://cloud.dwavesys.com"
_DEFAULT_TIMEOUT = 30.0
_POLL_INTERVAL = 0.1

SOLVERS_PATH = "/sapi/solvers/remote"
PROBLEMS_PATH = "/sapi/problems"


class SapiClient:
    """Synchronous HTTP client for a remote annealing service.

    Parameters
    ----------
    api_key : str
        Token sent in the ``X-Auth-Token`` header.
    base_url : str
        Base URL of the service.
    timeout : float
        HTTP request timeout in seconds (default: 30).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = _DEFAULT_BASE_URL,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                "Cannot execute kernels on the annealer without an API key"
            )
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key.strip()
        self._client = httpx.Client(
            timeout=timeout,
            headers={
                "X-Auth-Token": self._api_key,
                "Content-Type": "application/json",
                "Accept": "*/*",
            },
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "SapiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── Low-level helpers ──────────────────────────────────────────────

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Request to {self._base_url} failed: {exc}"
            ) from exc

        if resp.status_code >= 400:
            detail = resp.text
            try:
                detail = resp.json().get("error_msg", detail)
            except (ValueError, AttributeError):
                pass
            raise TransportError(detail, status_code=resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {url}: {exc}") from exc

    # ── Public API ─────────────────────────────────────────────────────

    def list_solvers(self) -> list[dict[str, Any]]:
        """Raw solver catalog."""
        data = self._request("GET", SOLVERS_PATH)
        if not isinstance(data, list):
            raise TransportError(f"Expected a solver list from {SOLVERS_PATH}")
        return data

    def submit(self, payload: str) -> str:
        """Post an encoded problem list and return the id of the first problem."""
        data = self._request("POST", PROBLEMS_PATH, content=payload)
        try:
            entry = data[0] if isinstance(data, list) else data
            job_id = str(entry["id"])
        except (KeyError, IndexError, TypeError) as exc:
            raise TransportError(f"Submission response carries no job id: {data!r}") from exc
        logger.info("Submitted problem %s", job_id)
        return job_id

    def status(self, job_id: str) -> JobStatus:
        """Get current problem status (and the answer once completed)."""
        data = self._request("GET", f"{PROBLEMS_PATH}/{job_id}")
        if not isinstance(data, dict):
            raise TransportError(f"Unexpected status body for {job_id}: {data!r}")
        return JobStatus(job_id=job_id, status=str(data.get("status", "")), raw=data)

    def wait(
        self,
        job_id: str,
        poll_interval: float = _POLL_INTERVAL,
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        """Poll until the problem completes and return its status body.

        Without ``timeout`` the wait is unbounded.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        polls = 0
        while True:
            st = self.status(job_id)
            polls += 1
            if st.is_terminal:
                if st.is_failed:
                    raise RemoteExecutionError(job_id, st.status, st.raw)
                logger.info("Problem %s completed after %d poll(s)", job_id, polls)
                return st.raw
            logger.debug("Problem %s is %s", job_id, st.status)
            if deadline is not None and time.monotonic() > deadline:
                raise JobTimeoutError(
                    f"Problem {job_id} did not complete within {timeout}s"
                )
            time.sleep(poll_interval)

    def run(
        self,
        payload: str,
        poll_interval: float = _POLL_INTERVAL,
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        """Submit a problem and wait for its completed status body."""
        job_id = self.submit(payload)
        return self.wait(job_id, poll_interval=poll_interval, timeout=timeout)
