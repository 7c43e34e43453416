"""Credentials, nonce generation and request signing for private endpoints."""

from .credentials import Credentials, decode_secret
from .nonce import ClockNonceSource, CounterNonceSource, NonceSource, shared_nonce_source
from .signing import (
    SignedRequest,
    build_post_body,
    prepare_private_params,
    sign_private_request,
    sign_request,
)

__all__ = [
    "Credentials",
    "decode_secret",
    "ClockNonceSource",
    "CounterNonceSource",
    "NonceSource",
    "shared_nonce_source",
    "SignedRequest",
    "build_post_body",
    "prepare_private_params",
    "sign_private_request",
    "sign_request",
]
