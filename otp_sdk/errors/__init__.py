"""
Error Taxonomy
==============
Structured errors raised by the OTP SDK.
"""

from .codes import ErrorCode, ErrorKind, ERROR_KINDS, is_retryable, default_status
from .exceptions import OtpError, OtpTransportError

__all__ = [
    # Codes
    "ErrorCode",
    "ErrorKind",
    "ERROR_KINDS",
    "is_retryable",
    "default_status",
    # Exceptions
    "OtpError",
    "OtpTransportError",
]
