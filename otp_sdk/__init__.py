"""
OTP SDK
=======
Python client for the Smart Pay Chain OTP verification service.
"""

__version__ = "2.1.5"

# Configuration
from otp_sdk.config import (
    OtpClientConfig,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
)

# Errors
from otp_sdk.errors import (
    ErrorCode,
    OtpError,
    OtpTransportError,
    is_retryable,
)

# Models
from otp_sdk.models import (
    OtpChannel,
    OtpStatusValue,
    SendOtpResponse,
    VerifyOtpResponse,
    OtpStatus,
    OtpStatusWithCode,
    SdkConfiguration,
    TEST_PHONE_NUMBERS,
    TEST_OTP_CODE,
)

# Transport
from otp_sdk.http import HttpTransport

# Client
from otp_sdk.client import (
    OtpClient,
    generate_idempotency_key,
    validate_e164,
)

__all__ = [
    "__version__",
    # Configuration
    "OtpClientConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    # Errors
    "ErrorCode",
    "OtpError",
    "OtpTransportError",
    "is_retryable",
    # Models
    "OtpChannel",
    "OtpStatusValue",
    "SendOtpResponse",
    "VerifyOtpResponse",
    "OtpStatus",
    "OtpStatusWithCode",
    "SdkConfiguration",
    "TEST_PHONE_NUMBERS",
    "TEST_OTP_CODE",
    # Transport
    "HttpTransport",
    # Client
    "OtpClient",
    "generate_idempotency_key",
    "validate_e164",
]
