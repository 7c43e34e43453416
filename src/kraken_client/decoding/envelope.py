"""Decoding of the `{"error": [...], "result": ...}` envelope."""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from kraken_client.decoding.shapes import Shape, resolve_shape
from kraken_client.errors import ExchangeError, FormatError


class ResponseEnvelope(BaseModel):
    error: List[str]
    result: Optional[Any] = None


def parse_envelope(raw: Union[bytes, str]) -> ResponseEnvelope:
    """Parse the raw body; anything that is not an envelope is a FormatError."""
    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise FormatError(f"Response body is not valid JSON: {e}") from e

    try:
        return ResponseEnvelope.model_validate(body)
    except ValidationError as e:
        err = e.errors()[0]
        name = ".".join(str(p) for p in err["loc"]) or "envelope"
        raise FormatError(
            f"Response is not a Kraken envelope: '{name}': {err['msg']}", field=name
        ) from e


def decode_envelope(raw: Union[bytes, str]) -> Any:
    """
    Return the untyped `result`, or raise.

    A non-empty `error` list always wins, even when `result` is also present.
    """
    envelope = parse_envelope(raw)

    if envelope.error:
        raise ExchangeError(" ".join(envelope.error), errors=envelope.error)

    if envelope.result is None:
        raise FormatError("Response has no errors and no result", field="result")

    return envelope.result


def decode_response(raw: Union[bytes, str], shapes: Sequence[Shape], endpoint: str = "result") -> Any:
    """Decode the envelope, then resolve `result` against the endpoint's shapes."""
    return resolve_shape(decode_envelope(raw), shapes, endpoint=endpoint)
