from __future__ import annotations

import time
from typing import Any, Dict, Optional

from kraken_client.api.endpoints import Endpoint, EndpointSpec, get_endpoint
from kraken_client.api.transport import HttpxTransport, Transport
from kraken_client.auth.credentials import Credentials
from kraken_client.auth.nonce import ClockNonceSource, NonceSource, shared_nonce_source
from kraken_client.auth.signing import Params, SignedRequest, params_to_dict, sign_private_request
from kraken_client.constants import PRIVATE_BODY_FIELDS
from kraken_client.core.config import ClientConfig
from kraken_client.core.logger import log_event, setup_logger
from kraken_client.decoding.envelope import decode_response
from kraken_client.decoding.models import (
    Asset,
    AssetPairs,
    OpenOrder,
    OrderBook,
    Ticker,
    TradeBalance,
)
from kraken_client.errors import KrakenError


class KrakenClient:
    """
    Dispatches Kraken REST calls: GET with a query string for public
    endpoints, signed form POST for private ones. Every response goes
    through the envelope decoder and the endpoint's shape list.

    No retries and no rate limiting; errors surface to the caller.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        nonce_source: Optional[NonceSource] = None,
    ):
        self.config = config or ClientConfig()
        self.credentials = credentials
        self.transport = transport or HttpxTransport(
            timeout_s=self.config.timeout_s, user_agent=self.config.user_agent
        )
        if self.config.log_dir:
            setup_logger(log_dir=str(self.config.log_dir))
        if nonce_source is None:
            if credentials is not None:
                nonce_source = shared_nonce_source(
                    credentials.fingerprint, self.config.nonce_store_dir
                )
            else:
                nonce_source = ClockNonceSource()
        self.nonce_source = nonce_source

    # Public endpoints

    def assets(self, params: Params = None) -> Dict[str, Asset]:
        return self.call(Endpoint.ASSETS, params)

    def asset_pairs(self, params: Params = None) -> AssetPairs:
        return self.call(Endpoint.ASSET_PAIRS, params)

    def ticker(self, params: Params = None) -> Dict[str, Ticker]:
        return self.call(Endpoint.TICKER, params)

    def order_book(self, params: Params = None) -> Dict[str, OrderBook]:
        return self.call(Endpoint.ORDER_BOOK, params)

    # Private endpoints

    def account_balance(self, params: Params = None) -> Dict[str, float]:
        return self.call(Endpoint.BALANCE, params)

    def trade_balance(self, params: Params = None) -> TradeBalance:
        return self.call(Endpoint.TRADE_BALANCE, params)

    def open_orders(self, params: Params = None) -> Dict[str, OpenOrder]:
        return self.call(Endpoint.OPEN_ORDERS, params)

    def call(self, endpoint: Endpoint, params: Params = None) -> Any:
        """Send one request to `endpoint` and return its decoded payload."""
        spec = get_endpoint(endpoint)
        url = spec.url(self.config.base_url)
        started = time.monotonic()

        try:
            if spec.private:
                signed = self.sign(spec, params)
                raw = self.transport.send(spec.method, url, signed.headers, signed.body)
            else:
                raw = self.transport.send(spec.method, url, {}, params_to_dict(params))
            result = decode_response(raw, spec.shapes, endpoint=spec.endpoint.value)
        except KrakenError as e:
            log_event(
                "kraken_error",
                {
                    "endpoint": spec.endpoint.value,
                    "error_type": type(e).__name__,
                    "details": str(e),
                },
            )
            raise

        log_event(
            "kraken_success",
            {
                "endpoint": spec.endpoint.value,
                "elapsed_ms": round((time.monotonic() - started) * 1000, 1),
            },
        )
        return result

    def sign(self, spec: EndpointSpec, params: Params = None) -> SignedRequest:
        """Build the signed POST for a private endpoint with a fresh nonce."""
        if self.credentials is None:
            raise ValueError(f"Credentials are required for private endpoint {spec.endpoint.value}")

        values = params_to_dict(params)
        unsupported = sorted(set(values) - set(PRIVATE_BODY_FIELDS))
        if unsupported:
            raise ValueError(
                f"Unsupported parameters for private endpoint {spec.endpoint.value}: "
                f"{', '.join(unsupported)} (only {', '.join(PRIVATE_BODY_FIELDS)} are sent)"
            )

        return sign_private_request(
            spec.path, values, self.credentials, self.nonce_source.next_nonce()
        )
