"""Kraken REST endpoints, their URL paths and candidate result shapes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from kraken_client.decoding.shapes import (
    ASSET_PAIRS_SHAPES,
    ASSETS_SHAPES,
    BALANCE_SHAPES,
    OPEN_ORDERS_SHAPES,
    ORDER_BOOK_SHAPES,
    TICKER_SHAPES,
    TRADE_BALANCE_SHAPES,
    Shape,
)

API_VERSION = "0"


class Endpoint(str, Enum):
    ASSETS = "Assets"
    ASSET_PAIRS = "AssetPairs"
    TICKER = "Ticker"
    ORDER_BOOK = "Depth"
    BALANCE = "Balance"
    TRADE_BALANCE = "TradeBalance"
    OPEN_ORDERS = "OpenOrders"


@dataclass(frozen=True)
class EndpointSpec:
    endpoint: Endpoint
    private: bool
    shapes: Tuple[Shape, ...]

    @property
    def path(self) -> str:
        scope = "private" if self.private else "public"
        return f"/{API_VERSION}/{scope}/{self.endpoint.value}"

    @property
    def method(self) -> str:
        return "POST" if self.private else "GET"

    def url(self, base_url: str) -> str:
        return base_url.rstrip("/") + self.path


ENDPOINTS: Dict[Endpoint, EndpointSpec] = {
    spec.endpoint: spec
    for spec in (
        EndpointSpec(Endpoint.ASSETS, private=False, shapes=ASSETS_SHAPES),
        EndpointSpec(Endpoint.ASSET_PAIRS, private=False, shapes=ASSET_PAIRS_SHAPES),
        EndpointSpec(Endpoint.TICKER, private=False, shapes=TICKER_SHAPES),
        EndpointSpec(Endpoint.ORDER_BOOK, private=False, shapes=ORDER_BOOK_SHAPES),
        EndpointSpec(Endpoint.BALANCE, private=True, shapes=BALANCE_SHAPES),
        EndpointSpec(Endpoint.TRADE_BALANCE, private=True, shapes=TRADE_BALANCE_SHAPES),
        EndpointSpec(Endpoint.OPEN_ORDERS, private=True, shapes=OPEN_ORDERS_SHAPES),
    )
}


def get_endpoint(endpoint: Endpoint) -> EndpointSpec:
    return ENDPOINTS[Endpoint(endpoint)]
