import json
import os
import threading
from typing import Any, Dict, List, Mapping, Optional
from unittest.mock import patch

import pytest

from kraken_client.auth.credentials import Credentials

# Reference secret from Kraken's signing examples
SECRET = "NZTRqjFqtb7Jbg5Yx7iRelcfCxiB7pL1FvvK3tokScThZDl0z7oi/m5aHhtKcUp2dIpT8qIbaMfp01Glzw24Ag=="
API_KEY = "test-api-key"


def envelope(result: Any = None, error: Optional[List[str]] = None) -> bytes:
    return json.dumps({"error": error or [], "result": result}).encode("utf-8")


class FakeTransport:
    """Records requests and replies with queued bodies (or raises queued errors)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def send(self, method: str, url: str, headers: Mapping[str, str], body_or_query: Any) -> bytes:
        with self._lock:
            self.calls.append(
                {"method": method, "url": url, "headers": dict(headers), "body": body_or_query}
            )
            response = self.responses[0] if len(self.responses) == 1 else self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def clean_env():
    """Keep KRAKEN_* settings from the developer's shell out of tests."""
    with patch.dict(os.environ):
        for key in [k for k in os.environ if k.startswith("KRAKEN_")]:
            del os.environ[key]
        yield


@pytest.fixture
def credentials():
    return Credentials(api_key=API_KEY, secret=SECRET)


@pytest.fixture
def asset_pair_info():
    return {
        "XXBTZUSD": {
            "altname": "XBTUSD",
            "wsname": "XBT/USD",
            "aclass_base": "currency",
            "base": "XXBT",
            "aclass_quote": "currency",
            "quote": "ZUSD",
            "lot": "unit",
            "cost_decimals": 5,
            "pair_decimals": 1,
            "lot_decimals": 8,
            "lot_multiplier": 1,
            "leverage_buy": [2, 3, 4, 5],
            "leverage_sell": [2, 3, 4, 5],
            "fees": [[0, 0.26], [50000, 0.24]],
            "fees_maker": [[0, 0.16], [50000, 0.14]],
            "fee_volume_currency": "ZUSD",
            "margin_call": 80,
            "margin_stop": 40,
            "ordermin": "0.0001",
            "costmin": "0.5",
            "tick_size": "0.1",
            "status": "online",
        }
    }


@pytest.fixture
def ticker_payload():
    return {
        "XXBTZUSD": {
            "a": ["30300.10000", "1", "1.000"],
            "b": ["30300.00000", "1", "1.000"],
            "c": ["30303.20000", "0.00067643"],
            "v": ["4083.67001100", "4412.73601799"],
            "p": ["30706.77771", "30689.13205"],
            "t": [34619, 38907],
            "l": ["29868.30000", "29868.30000"],
            "h": ["31631.00000", "31631.00000"],
            "o": "30502.80000",
        }
    }


@pytest.fixture
def order_book_payload():
    return {
        "XXBTZUSD": {
            "asks": [["30384.10000", "2.059", 1688671659], ["30387.90000", "1.500", 1688671380]],
            "bids": [["30297.00000", "0.115", 1688671656], ["30296.70000", "4.000", 1688671658]],
        }
    }


@pytest.fixture
def trade_balance_payload():
    return {
        "eb": "1101.3425",
        "tb": "392.2264",
        "m": "7.0354",
        "n": "-10.0232",
        "c": "21.1063",
        "v": "31.1297",
        "e": "382.2032",
        "mf": "375.1678",
        "ml": "5432.57",
    }


@pytest.fixture
def open_order():
    return {
        "refid": None,
        "userref": 0,
        "status": "open",
        "opentm": 1688666559.8974,
        "starttm": 0,
        "expiretm": 0,
        "descr": {
            "pair": "XBTUSD",
            "type": "buy",
            "ordertype": "limit",
            "price": "30010.0",
            "price2": "0",
            "leverage": "none",
            "order": "buy 1.25000000 XBTUSD @ limit 30010.0",
            "close": "",
        },
        "vol": "1.25000000",
        "vol_exec": "0.37500000",
        "cost": "11253.7",
        "fee": "0.00000",
        "price": "30010.0",
        "stopprice": "0.00000",
        "limitprice": "0.00000",
        "misc": "",
        "oflags": "fciq",
        "trades": ["TCCCTY-WE2O6-P3NB37"],
    }
