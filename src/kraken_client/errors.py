"""Error classification for Kraken REST calls."""

from typing import Any, Dict, List, Optional


class KrakenError(Exception):
    """Base class for all client errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class NetworkError(KrakenError):
    """
    Transport failures: timeouts, connection refused, TLS, DNS, non-2xx status.

    Never retried by the client; the caller owns retry policy.
    """

    def __init__(
        self, message: str = "Network error occurred", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code="NETWORK_ERROR", details=details)


class ExchangeError(KrakenError):
    """The exchange rejected the request (non-empty `error` list)."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message, error_code="EXCHANGE_ERROR")
        self.errors = list(errors) if errors is not None else [message]


class DecodeError(KrakenError):
    """The API secret is not valid base64. Fatal configuration error."""

    def __init__(self, message: str = "API secret is not valid base64"):
        super().__init__(message, error_code="DECODE_ERROR")


class FormatError(KrakenError):
    """The response did not match any expected shape for the endpoint."""

    def __init__(
        self,
        message: str = "Invalid format",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code="FORMAT_ERROR", details=details)
        self.field = field


class NonceStoreError(KrakenError):
    """The persisted nonce counter could not be read."""

    def __init__(self, message: str, path: Optional[Any] = None):
        super().__init__(message, error_code="NONCE_STORE_ERROR", details={"path": str(path)})
        self.path = path
