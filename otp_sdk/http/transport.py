import asyncio
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from otp_sdk.config import OtpClientConfig
from otp_sdk.errors import OtpError, OtpTransportError

logger = structlog.get_logger(__name__)

IDEMPOTENCY_HEADER = "X-Idempotency-Key"


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, OtpError) and exc.retryable


class HttpTransport:
    """
    Async HTTP transport for the OTP service.

    Features:
    - Identification headers on every request.
    - Success envelope unwrapping; error envelopes raised as OtpError.
    - Exponential backoff (1s, 2s, 4s, ...) on retryable OtpErrors for
      POST requests, resending the same body and idempotency key.
    - Network failures raised as OtpTransportError, never retried.
    """

    def __init__(
        self,
        config: OtpClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.max_retries = config.max_retries
        self._sleep = sleep

        self.client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            headers=self._build_headers(),
            transport=transport,
        )

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def _build_headers(self) -> Dict[str, str]:
        identification = {
            "Content-Type": "application/json",
            "X-API-Key": self.config.api_key,
            "X-OTP-SDK-Version": self.config.sdk_version,
            "X-OTP-SDK-Platform": self.config.platform,
            "X-OTP-SDK-Language": self.config.language,
        }
        # Custom headers never shadow identification headers
        reserved = {name.lower() for name in identification}
        headers = {
            name: value
            for name, value in self.config.headers.items()
            if name.lower() not in reserved
        }
        headers.update(identification)
        return headers

    def _map_transport_exception(self, exc: httpx.HTTPError) -> OtpTransportError:
        """Map httpx exceptions to connectivity faults."""
        if isinstance(exc, httpx.TimeoutException):
            return OtpTransportError("Request timed out")
        if isinstance(exc, httpx.NetworkError):
            return OtpTransportError(f"Failed to connect: {exc}")
        return OtpTransportError(f"HTTP transport failure: {exc}")

    def _unwrap(self, response: httpx.Response) -> Any:
        """Return the `data` payload of a success envelope or raise."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            raise OtpError.from_api_error(body)

        if not response.is_success:
            raise OtpTransportError(
                f"HTTP {response.status_code} without error envelope",
                status_code=response.status_code,
            )

        if not isinstance(body, dict) or "data" not in body:
            raise OtpTransportError(
                "Malformed success envelope",
                status_code=response.status_code,
            )

        return body["data"]

    async def _send_once(
        self,
        method: str,
        path: str,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        try:
            response = await self.client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise self._map_transport_exception(e) from e
        return self._unwrap(response)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Retrying after failure",
            attempt=retry_state.attempt_number,
            max_attempts=self.max_retries,
            delay=retry_state.next_action.sleep if retry_state.next_action else None,
            code=exc.code.value if isinstance(exc, OtpError) else None,
        )

    def _retrying(self) -> AsyncRetrying:
        # A fresh controller per request: tenacity keeps per-call state on it
        return AsyncRetrying(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, exp_base=2),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        retry: bool = False,
    ) -> Any:
        """
        Execute a request and return the unwrapped response data.

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            json: Request body
            headers: Per-request headers (e.g. the idempotency key)
            retry: Retry retryable OtpErrors with exponential backoff

        Raises:
            OtpError: The service answered with an error envelope
            OtpTransportError: The service could not be reached
        """
        if not retry:
            return await self._send_once(method, path, json=json, headers=headers)

        try:
            return await self._retrying()(
                self._send_once, method, path, json=json, headers=headers
            )
        except OtpError as e:
            if e.retryable:
                logger.error(
                    "Retry exhausted",
                    method=method,
                    path=path,
                    attempts=self.max_retries,
                    code=e.code.value,
                )
            raise

    async def get(self, path: str, headers: Optional[Mapping[str, str]] = None) -> Any:
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        return await self.request("POST", path, json=json, headers=headers, retry=True)
