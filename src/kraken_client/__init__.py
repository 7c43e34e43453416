"""Client for the Kraken REST API: request signing and response decoding."""

from .api import Endpoint, HttpxTransport, KrakenClient, Transport
from .auth import ClockNonceSource, CounterNonceSource, Credentials, sign_request
from .core.config import ClientConfig, load_client_config, load_credentials
from .errors import (
    DecodeError,
    ExchangeError,
    FormatError,
    KrakenError,
    NetworkError,
    NonceStoreError,
)

__version__ = "0.1.0"

__all__ = [
    "Endpoint",
    "HttpxTransport",
    "KrakenClient",
    "Transport",
    "ClockNonceSource",
    "CounterNonceSource",
    "Credentials",
    "sign_request",
    "ClientConfig",
    "load_client_config",
    "load_credentials",
    "DecodeError",
    "ExchangeError",
    "FormatError",
    "KrakenError",
    "NetworkError",
    "NonceStoreError",
]
