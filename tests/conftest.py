"""
Shared fixtures for OTP SDK tests.

HTTP traffic goes through httpx.MockTransport backed by a scripted fake
server; backoff sleeps are recorded instead of awaited.
"""

import json
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Union

import httpx
import pytest

from otp_sdk import OtpClient, OtpClientConfig
from otp_sdk.http import HttpTransport

API_KEY = "test-api-key"
BASE_URL = "https://otp.test"


class FakeOtpServer:
    """Replays queued responses in order and records every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._script: Deque[Union[httpx.Response, Exception]] = deque()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._script:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        step = self._script.popleft()
        if isinstance(step, Exception):
            raise step
        return step

    def reply(self, data: Any, status_code: int = 200) -> "FakeOtpServer":
        """Queue a success envelope."""
        self._script.append(httpx.Response(status_code, json={"success": True, "data": data}))
        return self

    def fail(
        self,
        code: str,
        status_code: int,
        message: str = "Request failed",
        retryable: bool = False,
        details: Optional[Dict[str, Any]] = None,
        request_id: str = "req_meta_1",
    ) -> "FakeOtpServer":
        """Queue an error envelope."""
        error: Dict[str, Any] = {
            "code": code,
            "message": message,
            "statusCode": status_code,
            "retryable": retryable,
        }
        if details is not None:
            error["details"] = details
        self._script.append(httpx.Response(
            status_code,
            json={
                "success": False,
                "error": error,
                "meta": {"requestId": request_id, "timestamp": "2024-12-25T12:00:00Z"},
            },
        ))
        return self

    def respond(self, response: httpx.Response) -> "FakeOtpServer":
        self._script.append(response)
        return self

    def raise_(self, exc: Exception) -> "FakeOtpServer":
        self._script.append(exc)
        return self

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> Any:
        content = self.requests[index].content
        return json.loads(content) if content else None


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def server() -> FakeOtpServer:
    return FakeOtpServer()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_transport(server, sleeper):
    """Factory for an HttpTransport wired to the fake server."""
    def _make(**config_options: Any) -> HttpTransport:
        options = {"api_key": API_KEY, "base_url": BASE_URL}
        options.update(config_options)
        config = OtpClientConfig(**options)
        return HttpTransport(config, transport=httpx.MockTransport(server.handler), sleep=sleeper)
    return _make


@pytest.fixture
def make_client(make_transport):
    """Factory for an OtpClient wired to the fake server."""
    def _make(**config_options: Any) -> OtpClient:
        http = make_transport(**config_options)
        return OtpClient(http.config, http=http)
    return _make


@pytest.fixture
def client(make_client) -> OtpClient:
    return make_client()
