"""
OTP Models
==========
Request/response models for the OTP endpoints.
"""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


class OtpChannel(str, Enum):
    """OTP delivery channels."""
    SMS = "SMS"
    WHATSAPP = "WHATSAPP"
    VOICE = "VOICE"


class OtpStatusValue(str, Enum):
    """
    Server-side lifecycle of an OTP request.

    PENDING -> SENT -> VERIFIED | EXPIRED | FAILED
    """
    PENDING = "PENDING"
    SENT = "SENT"
    VERIFIED = "VERIFIED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (OtpStatusValue.VERIFIED, OtpStatusValue.EXPIRED, OtpStatusValue.FAILED)


class SendOtpResponse(WireModel):
    """Handle for an OTP request, returned by send and resend."""
    request_id: str
    expires_at: datetime
    status: OtpStatusValue


class VerifyOtpResponse(WireModel):
    success: bool
    message: str = ""


class OtpStatus(WireModel):
    """OTP status as reported by the authenticated status endpoint."""
    id: str
    phone_number: str  # masked by the server
    channel: OtpChannel
    status: OtpStatusValue
    attempts: int
    max_attempts: int
    expires_at: datetime
    verified_at: Optional[datetime] = None
    created_at: datetime
    is_expired: bool


class OtpStatusWithCode(OtpStatus):
    """
    OTP status including the plaintext code.

    WARNING: development/testing only. Never use in production code.
    """
    otp_code: str
    sms_provider: Optional[str] = None
    sms_message_id: Optional[str] = None


# Only honoured while the server runs in test mode
TEST_PHONE_NUMBERS = MappingProxyType({
    "SUCCESS": "+15005550006",              # always succeeds
    "SMS_FAIL": "+15005550007",             # SMS_SEND_FAILED
    "RATE_LIMIT": "+15005550008",           # RATE_LIMIT_EXCEEDED
    "INSUFFICIENT_BALANCE": "+15005550009",  # INSUFFICIENT_BALANCE
    "BRAND_NOT_AUTH": "+15005550010",       # BRAND_NOT_AUTHORIZED
})

TEST_OTP_CODE = "123456"
