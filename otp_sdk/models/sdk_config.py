"""
SDK Configuration Models
========================
Server-provided configuration and the cached snapshot that holds it.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import Field

from .otp import WireModel


class OtpDefaults(WireModel):
    length: int = 6
    ttl: int = 300
    max_attempts: int = 3


class RateLimitWindow(WireModel):
    limit: int
    window: str


class RateLimits(WireModel):
    per_phone: Optional[RateLimitWindow] = None
    per_account: Optional[RateLimitWindow] = None
    per_ip: Optional[RateLimitWindow] = Field(default=None, alias="perIP")


class Pricing(WireModel):
    currency: str = ""
    regions: Dict[str, Any] = Field(default_factory=dict)
    default_price: float = 0.0


class SdkFeatures(WireModel):
    georgian_language: bool = False
    custom_branding: bool = False
    webhooks: bool = False
    idempotency: bool = False
    test_mode: bool = False
    long_polling: bool = False
    batch_operations: bool = False


class SdkEndpoints(WireModel):
    base: str = ""
    docs: str = ""
    status: str = ""


class ServerTestMode(WireModel):
    enabled: bool = False
    test_phone_numbers: List[str] = Field(default_factory=list)
    fixed_otp_code: Optional[str] = None


class SdkConfiguration(WireModel):
    """Configuration published by the service at /api/v1/sdk/config."""
    version: str = ""
    otp_config: OtpDefaults = Field(default_factory=OtpDefaults)
    rate_limits: RateLimits = Field(default_factory=RateLimits)
    supported_countries: List[str] = Field(default_factory=list)
    pricing: Pricing = Field(default_factory=Pricing)
    features: SdkFeatures = Field(default_factory=SdkFeatures)
    endpoints: SdkEndpoints = Field(default_factory=SdkEndpoints)
    test_mode: Optional[ServerTestMode] = None


@dataclass(frozen=True)
class ConfigSnapshot:
    """Point-in-time copy of the server configuration."""
    content: SdkConfiguration
    fetched_at_ms: int

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        return now_ms - self.fetched_at_ms < ttl_ms
