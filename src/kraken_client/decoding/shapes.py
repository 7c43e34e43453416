"""
Untagged result-shape resolution.

Several endpoints return structurally different payloads under `result`
depending on request parameters, with no type tag on the wire. Each endpoint
gets an ordered tuple of Shape matchers; the first one that validates wins.
Matchers validate the already-parsed JSON value, so a failed attempt leaves
nothing consumed for the next one.

Shapes that are proper structural subsets of another (AssetPairs fees and
margin) forbid extra keys, so exactly one candidate can accept a payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from kraken_client.core.logger import logger
from kraken_client.decoding.models import (
    Asset,
    AssetPairFees,
    AssetPairInfo,
    AssetPairMargin,
    AssetPairs,
    AssetPairVariant,
    OpenOrder,
    OrderBook,
    Ticker,
    TradeBalance,
)
from kraken_client.decoding.numeric import DecimalStr
from kraken_client.errors import FormatError

# Error types that mean "this is a different shape", as opposed to
# "this shape, but a field value is bad"
STRUCTURAL_ERRORS = frozenset(
    {
        "missing",
        "extra_forbidden",
        "dict_type",
        "list_type",
        "tuple_type",
        "model_type",
        "model_attributes_type",
        "too_short",
        "too_long",
    }
)


def _field_name(loc: Sequence[Any]) -> str:
    return ".".join(str(part) for part in loc) or "result"


@dataclass
class ShapeAttempt:
    shape: str
    value: Any = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return not self.errors

    @property
    def structural(self) -> bool:
        return any(err["type"] in STRUCTURAL_ERRORS for err in self.errors)


@dataclass(frozen=True)
class Shape:
    """One candidate payload shape for an endpoint."""

    name: str
    adapter: TypeAdapter
    wrapper_key: Optional[str] = None
    build: Optional[Callable[[Any], Any]] = None

    def attempt(self, payload: Any) -> ShapeAttempt:
        prefix: Tuple[Any, ...] = ()
        if self.wrapper_key is not None:
            if not isinstance(payload, dict) or self.wrapper_key not in payload:
                return ShapeAttempt(
                    self.name,
                    errors=[
                        {
                            "type": "missing",
                            "loc": (self.wrapper_key,),
                            "msg": f"wrapper key '{self.wrapper_key}' not present",
                        }
                    ],
                )
            payload = payload[self.wrapper_key]
            prefix = (self.wrapper_key,)

        try:
            value = self.adapter.validate_python(payload)
        except ValidationError as e:
            errors = [
                {"type": err["type"], "loc": prefix + tuple(err["loc"]), "msg": err["msg"]}
                for err in e.errors()
            ]
            return ShapeAttempt(self.name, errors=errors)

        if self.build is not None:
            value = self.build(value)
        return ShapeAttempt(self.name, value=value)


def resolve_shape(payload: Any, shapes: Sequence[Shape], endpoint: str = "result") -> Any:
    """
    Return the value produced by the first matching shape.

    A candidate that fails only on field values (no missing/extra keys or
    wrong container types) is taken as the intended shape: resolution stops
    and FormatError names the bad field. If nothing matches structurally,
    FormatError lists every candidate tried.
    """
    if not shapes:
        raise ValueError(f"No candidate shapes registered for {endpoint}")

    attempts: List[ShapeAttempt] = []
    for shape in shapes:
        attempt = shape.attempt(payload)
        if attempt.matched:
            logger.debug(f"{endpoint}: payload resolved to '{shape.name}' shape")
            return attempt.value

        if not attempt.structural:
            err = attempt.errors[0]
            name = _field_name(err["loc"])
            raise FormatError(
                f"{endpoint}: invalid field '{name}' in {shape.name} shape: {err['msg']}",
                field=name,
                details={"shape": shape.name, "errors": attempt.errors[:10]},
            )
        attempts.append(attempt)

    first = attempts[0].errors[0]
    names = ", ".join(a.shape for a in attempts)
    raise FormatError(
        f"{endpoint}: payload matched none of the candidate shapes ({names}); "
        f"first mismatch at '{_field_name(first['loc'])}': {first['msg']}",
        field=_field_name(first["loc"]) if len(attempts) == 1 else None,
        details={"attempts": {a.shape: a.errors[:10] for a in attempts}},
    )


def _asset_pairs(variant: AssetPairVariant, pairs: Dict[str, Any]) -> AssetPairs:
    return AssetPairs(variant=variant, pairs=pairs)


ASSETS_SHAPES = (Shape("assets", TypeAdapter(Dict[str, Asset])),)

# Priority: full info, then fees-only, then margin-only
ASSET_PAIRS_SHAPES = (
    Shape(
        "info",
        TypeAdapter(Dict[str, AssetPairInfo]),
        build=partial(_asset_pairs, AssetPairVariant.INFO),
    ),
    Shape(
        "fees",
        TypeAdapter(Dict[str, AssetPairFees]),
        build=partial(_asset_pairs, AssetPairVariant.FEES),
    ),
    Shape(
        "margin",
        TypeAdapter(Dict[str, AssetPairMargin]),
        build=partial(_asset_pairs, AssetPairVariant.MARGIN),
    ),
)

TICKER_SHAPES = (Shape("ticker", TypeAdapter(Dict[str, Ticker])),)

ORDER_BOOK_SHAPES = (Shape("order_book", TypeAdapter(Dict[str, OrderBook])),)

BALANCE_SHAPES = (Shape("balance", TypeAdapter(Dict[str, DecimalStr])),)

TRADE_BALANCE_SHAPES = (Shape("trade_balance", TypeAdapter(TradeBalance)),)

# Unlike every other map-returning endpoint, open orders sit under "open"
OPEN_ORDERS_SHAPES = (
    Shape("open_orders", TypeAdapter(Dict[str, OpenOrder]), wrapper_key="open"),
)
