"""
Error Codes
===========
Closed set of error codes returned by the OTP service, with the default
HTTP status and retry hint for each.
"""

from typing import Dict, NamedTuple, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes returned by the API."""
    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INVALID_API_KEY = "INVALID_API_KEY"
    API_KEY_REVOKED = "API_KEY_REVOKED"

    # Phone Number
    INVALID_PHONE_NUMBER = "INVALID_PHONE_NUMBER"
    PHONE_NUMBER_BLOCKED = "PHONE_NUMBER_BLOCKED"

    # OTP
    OTP_EXPIRED = "OTP_EXPIRED"
    OTP_MAX_ATTEMPTS = "OTP_MAX_ATTEMPTS"
    INVALID_OTP_CODE = "INVALID_OTP_CODE"
    OTP_NOT_FOUND = "OTP_NOT_FOUND"
    OTP_ALREADY_VERIFIED = "OTP_ALREADY_VERIFIED"

    # Rate Limiting
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Billing
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"

    # Brand
    NO_BRAND_CONFIGURED = "NO_BRAND_CONFIGURED"
    BRAND_NOT_AUTHORIZED = "BRAND_NOT_AUTHORIZED"
    BRAND_PENDING_APPROVAL = "BRAND_PENDING_APPROVAL"
    BRAND_CREATION_FAILED = "BRAND_CREATION_FAILED"

    # SMS Provider
    SMS_SEND_FAILED = "SMS_SEND_FAILED"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # Server
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Idempotency
    IDEMPOTENCY_KEY_CONFLICT = "IDEMPOTENCY_KEY_CONFLICT"

    # Anything the server sends that this SDK version does not know
    UNCLASSIFIED = "UNCLASSIFIED"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ErrorCode":
        """Map a wire code to an ErrorCode, degrading to UNCLASSIFIED."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            return cls.UNCLASSIFIED


class ErrorKind(NamedTuple):
    """Fixed properties of an error code."""
    status_code: int
    retryable: bool


ERROR_KINDS: Dict[ErrorCode, ErrorKind] = {
    ErrorCode.AUTHENTICATION_FAILED: ErrorKind(401, False),
    ErrorCode.INVALID_API_KEY: ErrorKind(401, False),
    ErrorCode.API_KEY_REVOKED: ErrorKind(401, False),
    ErrorCode.INVALID_PHONE_NUMBER: ErrorKind(400, False),
    ErrorCode.PHONE_NUMBER_BLOCKED: ErrorKind(403, False),
    ErrorCode.OTP_EXPIRED: ErrorKind(400, False),
    ErrorCode.OTP_MAX_ATTEMPTS: ErrorKind(429, False),
    ErrorCode.INVALID_OTP_CODE: ErrorKind(400, False),
    ErrorCode.OTP_NOT_FOUND: ErrorKind(404, False),
    ErrorCode.OTP_ALREADY_VERIFIED: ErrorKind(409, False),
    ErrorCode.RATE_LIMIT_EXCEEDED: ErrorKind(429, True),
    ErrorCode.INSUFFICIENT_BALANCE: ErrorKind(402, False),
    ErrorCode.PAYMENT_REQUIRED: ErrorKind(402, False),
    ErrorCode.NO_BRAND_CONFIGURED: ErrorKind(400, False),
    ErrorCode.BRAND_NOT_AUTHORIZED: ErrorKind(403, False),
    ErrorCode.BRAND_PENDING_APPROVAL: ErrorKind(403, False),
    ErrorCode.BRAND_CREATION_FAILED: ErrorKind(500, False),
    ErrorCode.SMS_SEND_FAILED: ErrorKind(502, False),
    ErrorCode.PROVIDER_UNAVAILABLE: ErrorKind(503, True),
    ErrorCode.VALIDATION_ERROR: ErrorKind(400, False),
    ErrorCode.MISSING_REQUIRED_FIELD: ErrorKind(400, False),
    ErrorCode.INTERNAL_SERVER_ERROR: ErrorKind(500, False),
    ErrorCode.SERVICE_UNAVAILABLE: ErrorKind(503, True),
    ErrorCode.IDEMPOTENCY_KEY_CONFLICT: ErrorKind(409, False),
    ErrorCode.UNCLASSIFIED: ErrorKind(500, False),
}


def is_retryable(code: ErrorCode) -> bool:
    """Whether requests failing with `code` may be retried."""
    return ERROR_KINDS[code].retryable


def default_status(code: ErrorCode) -> int:
    """HTTP status used when the server does not send one."""
    return ERROR_KINDS[code].status_code
