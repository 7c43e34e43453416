"""Response envelope decoding, shape resolution and numeric coercion."""

from .envelope import ResponseEnvelope, decode_envelope, decode_response, parse_envelope
from .models import (
    Asset,
    AssetPairFees,
    AssetPairInfo,
    AssetPairMargin,
    AssetPairs,
    AssetPairVariant,
    OpenOrder,
    OrderBook,
    OrderDescription,
    Ticker,
    TradeBalance,
)
from .numeric import coerce_decimal, format_decimal
from .shapes import Shape, resolve_shape

__all__ = [
    "ResponseEnvelope",
    "decode_envelope",
    "decode_response",
    "parse_envelope",
    "Asset",
    "AssetPairFees",
    "AssetPairInfo",
    "AssetPairMargin",
    "AssetPairs",
    "AssetPairVariant",
    "OpenOrder",
    "OrderBook",
    "OrderDescription",
    "Ticker",
    "TradeBalance",
    "format_decimal",
    "coerce_decimal",
    "Shape",
    "resolve_shape",
]
