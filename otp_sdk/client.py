"""
OTP Client
==========
Send and verify one-time passcodes through the OTP verification service.

Usage:
    from otp_sdk import OtpClient

    async with OtpClient(api_key="your-api-key") as client:
        handle = await client.send_otp("+995555123456")
        result = await client.verify_otp(handle.request_id, "123456")
"""

import re
import secrets
import string
import time
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from otp_sdk.config import OtpClientConfig
from otp_sdk.errors import OtpError, OtpTransportError
from otp_sdk.http import HttpTransport, IDEMPOTENCY_HEADER
from otp_sdk.models import (
    ConfigSnapshot,
    OtpChannel,
    OtpStatus,
    OtpStatusWithCode,
    SdkConfiguration,
    SendOtpResponse,
    VerifyOtpResponse,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

CONFIG_CACHE_TTL_MS = 3_600_000  # 1 hour

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$", re.ASCII)

MIN_CODE_LENGTH = 4
MAX_CODE_LENGTH = 8

_TOKEN_ALPHABET = string.digits + string.ascii_lowercase


def _now_ms() -> int:
    return int(time.time() * 1000)


def validate_e164(phone_number: str) -> bool:
    """Check that a phone number is in E.164 format (e.g. +995555123456)."""
    return isinstance(phone_number, str) and E164_PATTERN.fullmatch(phone_number) is not None


def generate_idempotency_key() -> str:
    """
    Generate a unique idempotency key.

    Returns:
        Key in the format `{epoch_millis}-{random}`
    """
    timestamp = _now_ms()
    token = "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(13))
    return f"{timestamp}-{token}"


class OtpClient:
    """
    Client for the OTP verification service.

    Local validation failures raise OtpError(VALIDATION_ERROR) without
    touching the network. Every other failure is either an OtpError from
    the service or an OtpTransportError.
    """

    def __init__(
        self,
        config: Optional[OtpClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http: Optional[HttpTransport] = None,
        **options: Any,
    ):
        """
        Args:
            config: Client configuration. When omitted, `options` are passed
                to OtpClientConfig (api_key is then required).
            transport: Custom httpx transport (tests, proxies)
            http: Pre-built HttpTransport; overrides `transport`
            **options: OtpClientConfig fields, applied over `config`
        """
        if config is None:
            config = OtpClientConfig(**options)
        elif options:
            config = config.with_overrides(**options)

        self.config = config
        self.http = http or HttpTransport(config, transport=transport)
        self._config_snapshot: Optional[ConfigSnapshot] = None

    async def __aenter__(self) -> "OtpClient":
        if self.config.auto_config:
            try:
                await self.get_config()
            except Exception as e:
                logger.warning("Failed to auto-fetch SDK configuration", error=str(e))
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    # Validation

    @staticmethod
    def _require_request_id(request_id: str) -> None:
        if not request_id:
            raise OtpError.validation("Request ID is required", {"field": "requestId"})

    @staticmethod
    def _parse(model: Type[T], data: Any) -> T:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise OtpTransportError(
                f"Unexpected {model.__name__} payload: {e.error_count()} validation error(s)"
            ) from e

    # OTP operations

    async def send_otp(
        self,
        phone_number: str,
        channel: OtpChannel = OtpChannel.SMS,
        ttl: int = 300,
        length: int = 6,
        metadata: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> SendOtpResponse:
        """
        Send an OTP to a phone number.

        Args:
            phone_number: Phone number in E.164 format
            channel: Delivery channel
            ttl: Time-to-live in seconds
            length: Number of digits in the code
            metadata: Custom metadata attached to the request
            idempotency_key: Reuse a key to deduplicate a logical send;
                one is generated when omitted

        Returns:
            Handle with request_id (save it for verification) and expires_at
        """
        if not validate_e164(phone_number):
            raise OtpError.validation(
                "Invalid phone number format. Must be in E.164 format (e.g., +995555123456)",
                {"field": "phoneNumber"},
            )

        try:
            channel = OtpChannel(channel)
        except ValueError:
            raise OtpError.validation(f"Unsupported channel: {channel}", {"field": "channel"})

        body = {
            "phoneNumber": phone_number,
            "channel": channel.value,
            "ttl": ttl,
            "length": length,
        }
        if metadata is not None:
            body["metadata"] = metadata
        headers = {IDEMPOTENCY_HEADER: idempotency_key or generate_idempotency_key()}

        data = await self.http.post("/api/v1/otp/send", json=body, headers=headers)
        return self._parse(SendOtpResponse, data)

    async def verify_otp(
        self,
        request_id: str,
        code: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> VerifyOtpResponse:
        """
        Verify an OTP code.

        Args:
            request_id: Request ID returned by send_otp()
            code: Code entered by the user (4-8 characters)
            ip_address: IP address of the user (recommended)
            user_agent: User agent of the user
        """
        self._require_request_id(request_id)
        if not code or not MIN_CODE_LENGTH <= len(code) <= MAX_CODE_LENGTH:
            raise OtpError.validation(
                f"Code must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH} characters",
                {"field": "code"},
            )

        body = {"requestId": request_id, "code": code}
        if ip_address is not None:
            body["ipAddress"] = ip_address
        if user_agent is not None:
            body["userAgent"] = user_agent

        data = await self.http.post("/api/v1/otp/verify", json=body)
        return self._parse(VerifyOtpResponse, data)

    async def resend_otp(self, request_id: str) -> SendOtpResponse:
        """Send a new code for an existing request. Always uses a fresh idempotency key."""
        self._require_request_id(request_id)

        headers = {IDEMPOTENCY_HEADER: generate_idempotency_key()}
        data = await self.http.post(f"/api/v1/otp/{request_id}/resend", headers=headers)
        return self._parse(SendOtpResponse, data)

    async def get_status(self, request_id: str) -> OtpStatus:
        """Get OTP status (authenticated endpoint)."""
        self._require_request_id(request_id)

        data = await self.http.get(f"/api/v1/otp/{request_id}")
        return self._parse(OtpStatus, data)

    async def get_status_with_code(self, request_id: str) -> OtpStatusWithCode:
        """
        Get OTP status including the plaintext code (public endpoint).

        WARNING: returns the actual OTP code. Only for development and
        automated tests; never call this from production code.
        """
        self._require_request_id(request_id)

        logger.warning("Fetching plaintext OTP code; test/dev use only", request_id=request_id)
        data = await self.http.get(f"/api/v1/otp/{request_id}/status")
        return self._parse(OtpStatusWithCode, data)

    # SDK configuration

    async def get_config(self, force_refresh: bool = False) -> SdkConfiguration:
        """
        Get the SDK configuration from the server.

        Cached for one hour; past that, or with force_refresh, it is
        fetched again and the cached snapshot replaced.
        """
        snapshot = self._config_snapshot
        if (
            not force_refresh
            and snapshot is not None
            and snapshot.is_fresh(_now_ms(), CONFIG_CACHE_TTL_MS)
        ):
            return snapshot.content

        data = await self.http.get("/api/v1/sdk/config")
        content = self._parse(SdkConfiguration, data)
        self._config_snapshot = ConfigSnapshot(content=content, fetched_at_ms=_now_ms())

        if content.features.test_mode:
            logger.warning(
                "Test mode is enabled on the server. Use test phone numbers for testing",
                test_phone_numbers=content.test_mode.test_phone_numbers if content.test_mode else [],
            )

        return content

    async def test_connection(self) -> bool:
        """Return True if the OTP service is reachable. Never raises."""
        try:
            await self.http.get("/api/v1/sdk/test")
            return True
        except Exception as e:
            logger.debug("Connection test failed", error=str(e))
            return False

    async def is_test_mode(self) -> bool:
        """Return True if the server runs in test mode. Never raises."""
        try:
            config = await self.get_config()
            return config.features.test_mode
        except Exception as e:
            logger.debug("Could not determine test mode", error=str(e))
            return False
