"""
OTP SDK Exceptions
==================
Every failure surfaces as one of two exception types:

- OtpError: the service (or local validation) rejected the request.
  Tagged by `code`; switch on it instead of catching subclasses.
- OtpTransportError: the service could not be reached, or answered
  without a structured error envelope.
"""

from typing import Optional, Any, Dict, Mapping

from .codes import ErrorCode, default_status, is_retryable


class OtpError(Exception):
    """Structured error returned by the OTP service."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNCLASSIFIED,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code if status_code is not None else default_status(code)
        self.details = details
        self.request_id = request_id
        self._retryable = is_retryable(code)
        super().__init__(f"[{code.value}] {message} (Status: {self.status_code})")

    @property
    def retryable(self) -> bool:
        return self._retryable

    @classmethod
    def from_api_error(cls, payload: Any) -> "OtpError":
        """
        Create an OtpError from an API error envelope.

        Unknown codes and malformed payloads degrade to UNCLASSIFIED
        instead of raising.
        The wire "retryable" flag is ignored: the retry hint always comes
        from the code, so every error with the same code retries alike.

        Args:
            payload: Parsed body, e.g.
                {"success": false,
                 "error": {"code", "message", "statusCode", "retryable", "details"},
                 "meta": {"requestId", "timestamp"}}
        """
        body = payload if isinstance(payload, Mapping) else {}
        error = body.get("error")
        error = error if isinstance(error, Mapping) else {}
        meta = body.get("meta")
        meta = meta if isinstance(meta, Mapping) else {}

        code = ErrorCode.parse(error.get("code"))

        status_code = error.get("statusCode")
        if not isinstance(status_code, int) or isinstance(status_code, bool):
            status_code = None

        details = error.get("details")
        if not isinstance(details, Mapping):
            details = None

        request_id = meta.get("requestId")

        return cls(
            str(error.get("message") or "Unknown error"),
            code=code,
            status_code=status_code,
            details=dict(details) if details is not None else None,
            request_id=str(request_id) if request_id is not None else None,
        )

    @classmethod
    def for_code(
        cls,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> "OtpError":
        """Build an error with the default HTTP status for `code`."""
        return cls(
            message,
            code=code,
            status_code=default_status(code),
            details=details,
            request_id=request_id,
        )

    @classmethod
    def validation(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "OtpError":
        """Local validation failure, raised before any network call."""
        return cls.for_code(ErrorCode.VALIDATION_ERROR, message, details=details)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code.value,
            "status_code": self.status_code,
            "retryable": self.retryable,
            "details": self.details,
            "request_id": self.request_id,
        }


class OtpTransportError(Exception):
    """Raised when the OTP service is unreachable or answers off-protocol."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(f"{message} (Status: {status_code})")
