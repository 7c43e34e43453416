"""Signing and body encoding for Kraken private REST calls."""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Tuple, Union
from urllib.parse import urlencode, urlsplit

from kraken_client.auth.credentials import Credentials, decode_secret
from kraken_client.constants import PRIVATE_BODY_FIELDS

Params = Union[Mapping[str, Any], Sequence[Tuple[str, Any]], None]


@dataclass(frozen=True)
class SignedRequest:
    path: str
    headers: Dict[str, str]
    body: str
    nonce: str


def params_to_dict(params: Params) -> Dict[str, str]:
    """Flatten mapping or ordered pairs into a dict; later keys overwrite earlier ones."""
    if not params:
        return {}
    items = params.items() if isinstance(params, Mapping) else params
    return {str(k): str(v) for k, v in items}


def url_path(url: str) -> str:
    """Return the path component if given a full URL, else the input unchanged."""
    if "://" in url:
        return urlsplit(url).path
    return url


def prepare_private_params(params: Params, nonce: Union[int, str]) -> Dict[str, str]:
    """
    Inject a nonce, then apply the caller's params on top.

    A caller-supplied nonce overwrites the generated one.
    """
    merged = {"nonce": str(nonce)}
    merged.update(params_to_dict(params))
    return merged


def build_post_body(params: Params) -> str:
    """
    Form-url-encode the POST-body fields (nonce, then otp if present).

    This is both what gets signed and what goes on the wire.
    """
    values = params_to_dict(params)
    return urlencode([(k, values[k]) for k in PRIVATE_BODY_FIELDS if k in values])


def _signature(path: str, nonce: str, body: str, key: bytes) -> str:
    digest = hashlib.sha256((nonce + body).encode("utf-8")).digest()
    message = url_path(path).encode("utf-8") + digest
    mac = hmac.new(key, message, hashlib.sha512).digest()
    return base64.b64encode(mac).decode("ascii")


def sign_request(path: str, params: Params, secret: str) -> str:
    """
    Compute the Kraken API-Sign value.

    sign = base64(HMAC-SHA512(path + SHA256(nonce + post_body), base64decode(secret)))

    Raises DecodeError if `secret` is not valid base64.
    """
    values = params_to_dict(params)
    if "nonce" not in values:
        raise ValueError("nonce is required to sign a private request")
    key = decode_secret(secret)
    try:
        return _signature(path, values["nonce"], build_post_body(values), bytes(key))
    finally:
        for i in range(len(key)):
            key[i] = 0


def sign_private_request(
    path: str, params: Params, credentials: Credentials, nonce: Union[int, str]
) -> SignedRequest:
    """Build the headers and body for a private POST."""
    values = prepare_private_params(params, nonce)
    body = build_post_body(values)
    with credentials.decoded_secret() as key:
        signature = _signature(path, values["nonce"], body, bytes(key))

    headers = {
        "API-Key": credentials.api_key,
        "API-Sign": signature,
        "Content-Type": "application/x-www-form-urlencoded; charset=utf-8",
    }
    return SignedRequest(path=url_path(path), headers=headers, body=body, nonce=values["nonce"])
