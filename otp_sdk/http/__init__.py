from .transport import HttpTransport, IDEMPOTENCY_HEADER

__all__ = [
    "HttpTransport",
    "IDEMPOTENCY_HEADER",
]
