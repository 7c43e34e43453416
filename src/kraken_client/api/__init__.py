"""Endpoint dispatch and HTTP transport."""

from .client import KrakenClient
from .endpoints import ENDPOINTS, Endpoint, EndpointSpec, get_endpoint
from .transport import HttpxTransport, Transport

__all__ = [
    "KrakenClient",
    "ENDPOINTS",
    "Endpoint",
    "EndpointSpec",
    "get_endpoint",
    "HttpxTransport",
    "Transport",
]
