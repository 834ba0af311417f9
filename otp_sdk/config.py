"""
Client Configuration
====================
Immutable settings for an OTP client instance.
"""

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from otp_sdk import __version__

DEFAULT_BASE_URL = "https://otp-service-production-ge.up.railway.app"
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_MAX_RETRIES = 3


@dataclass(frozen=True)
class OtpClientConfig:
    """Configuration for the OTP service connection."""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    headers: Mapping[str, str] = field(default_factory=dict)
    platform: str = "server"
    language: str = "python"
    sdk_version: str = __version__
    auto_config: bool = False

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("API key is required")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        # Freeze the caller's dict so later mutation cannot leak in
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> "OtpClientConfig":
        """
        Build a config from OTP_* environment variables.

        Reads OTP_API_KEY, OTP_BASE_URL, OTP_TIMEOUT and OTP_MAX_RETRIES.
        Keyword arguments take precedence over the environment.
        """
        values: dict = {
            "api_key": os.environ.get("OTP_API_KEY", ""),
            "base_url": os.environ.get("OTP_BASE_URL", DEFAULT_BASE_URL),
            "timeout": float(os.environ.get("OTP_TIMEOUT", DEFAULT_TIMEOUT)),
            "max_retries": int(os.environ.get("OTP_MAX_RETRIES", DEFAULT_MAX_RETRIES)),
        }
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **changes: Any) -> "OtpClientConfig":
        return replace(self, **changes)
