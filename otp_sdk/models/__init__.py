"""
OTP SDK Models
==============
Typed views over the OTP service wire format.
"""

from .otp import (
    WireModel,
    OtpChannel,
    OtpStatusValue,
    SendOtpResponse,
    VerifyOtpResponse,
    OtpStatus,
    OtpStatusWithCode,
    TEST_PHONE_NUMBERS,
    TEST_OTP_CODE,
)
from .sdk_config import (
    OtpDefaults,
    RateLimitWindow,
    RateLimits,
    Pricing,
    SdkFeatures,
    SdkEndpoints,
    ServerTestMode,
    SdkConfiguration,
    ConfigSnapshot,
)

__all__ = [
    # OTP
    "WireModel",
    "OtpChannel",
    "OtpStatusValue",
    "SendOtpResponse",
    "VerifyOtpResponse",
    "OtpStatus",
    "OtpStatusWithCode",
    "TEST_PHONE_NUMBERS",
    "TEST_OTP_CODE",
    # SDK configuration
    "OtpDefaults",
    "RateLimitWindow",
    "RateLimits",
    "Pricing",
    "SdkFeatures",
    "SdkEndpoints",
    "ServerTestMode",
    "SdkConfiguration",
    "ConfigSnapshot",
]
