from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kraken_client.api.client import KrakenClient
from kraken_client.core.config import load_client_config, load_credentials
from kraken_client.decoding.models import AssetPairVariant
from kraken_client.decoding.numeric import format_decimal
from kraken_client.errors import KrakenError

app = typer.Typer(add_completion=False, help="Kraken REST tools (public market data + account queries).")
console = Console()

CONFIG_OPTION = typer.Option(None, "--config", help="YAML or JSON client config file.")
OTP_OPTION = typer.Option(None, "--otp", help="One-time password, if 2FA is enabled on the key.")


def _client(config_path: Optional[Path], private: bool = False) -> KrakenClient:
    load_dotenv()
    config = load_client_config(config_path)
    credentials = load_credentials() if private else None
    return KrakenClient(credentials=credentials, config=config)


def _run(fn):
    try:
        return fn()
    except (KrakenError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


def _otp_params(otp: Optional[str]) -> Dict[str, str]:
    return {"otp": otp} if otp else {}


def _print_rows(title: str, columns: List[str], rows: List[List[Any]]) -> None:
    table = Table(title=title)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[escape(v) if isinstance(v, str) else format_decimal(v) for v in row])
    console.print(table)


@app.command()
def assets(
    asset: Optional[str] = typer.Option(None, help="Comma separated asset filter (e.g. XBT,ETH)."),
    config: Optional[Path] = CONFIG_OPTION,
):
    """List assets."""
    client = _run(lambda: _client(config))
    params = {"asset": asset} if asset else None
    data = _run(lambda: client.assets(params))
    _print_rows(
        "Assets",
        ["Asset", "Alt name", "Class", "Decimals"],
        [[k, a.altname, a.aclass, str(a.decimals)] for k, a in sorted(data.items())],
    )


@app.command("asset-pairs")
def asset_pairs(
    pair: Optional[str] = typer.Option(None, help="Comma separated pair filter."),
    info: AssetPairVariant = typer.Option(AssetPairVariant.INFO, help="info, fees or margin."),
    config: Optional[Path] = CONFIG_OPTION,
):
    """List tradable asset pairs."""
    client = _run(lambda: _client(config))
    params = {"info": info.value}
    if pair:
        params["pair"] = pair
    data = _run(lambda: client.asset_pairs(params))

    if data.variant == AssetPairVariant.FEES:
        rows = [[k, v.fee_volume_currency, str(v.fees[:1])] for k, v in sorted(data.pairs.items())]
        _print_rows("Asset pair fees", ["Pair", "Fee volume currency", "First tier"], rows)
    elif data.variant == AssetPairVariant.MARGIN:
        rows = [[k, str(v.margin_call), str(v.margin_level)] for k, v in sorted(data.pairs.items())]
        _print_rows("Asset pair margin", ["Pair", "Margin call", "Margin level"], rows)
    else:
        rows = [[k, v.base, v.quote, v.ordermin] for k, v in sorted(data.pairs.items())]
        _print_rows("Asset pairs", ["Pair", "Base", "Quote", "Min order"], rows)


@app.command()
def ticker(
    pair: str = typer.Argument(..., help="Pair (e.g. XBTUSD)."),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Show ticker for a pair."""
    client = _run(lambda: _client(config))
    data = _run(lambda: client.ticker({"pair": pair}))
    _print_rows(
        "Ticker",
        ["Pair", "Bid", "Ask", "Last", "Open", "Volume 24h"],
        [[k, t.bid, t.ask, t.last, t.o, t.v[-1]] for k, t in sorted(data.items())],
    )


@app.command()
def depth(
    pair: str = typer.Argument(..., help="Pair (e.g. XBTUSD)."),
    count: int = typer.Option(10, help="Max levels per side."),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Show the order book for a pair."""
    client = _run(lambda: _client(config))
    data = _run(lambda: client.order_book({"pair": pair, "count": count}))
    for name, book in sorted(data.items()):
        rows = [["ask", p, v] for p, v, _ in reversed(book.asks[:count])]
        rows += [["bid", p, v] for p, v, _ in book.bids[:count]]
        _print_rows(f"Order book {name}", ["Side", "Price", "Volume"], rows)


@app.command()
def balance(
    otp: Optional[str] = OTP_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """Show account balances (requires KRAKEN_API_KEY and KRAKEN_SECRET_KEY)."""
    client = _run(lambda: _client(config, private=True))
    data = _run(lambda: client.account_balance(_otp_params(otp)))
    if not data:
        console.print("No balances found.")
        return
    _print_rows("Balance", ["Asset", "Amount"], [[k, v] for k, v in sorted(data.items())])


@app.command("trade-balance")
def trade_balance(
    otp: Optional[str] = OTP_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """Show trade balance summary."""
    client = _run(lambda: _client(config, private=True))
    tb = _run(lambda: client.trade_balance(_otp_params(otp)))
    _print_rows(
        "Trade balance",
        ["Field", "Value"],
        [
            ["Equivalent balance", tb.eb],
            ["Trade balance", tb.tb],
            ["Margin", tb.m],
            ["Unrealized P/L", tb.n],
            ["Cost basis", tb.c],
            ["Valuation", tb.v],
            ["Equity", tb.e],
            ["Free margin", tb.mf],
            ["Margin level", tb.ml],
        ],
    )


@app.command("open-orders")
def open_orders(
    otp: Optional[str] = OTP_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """List open orders."""
    client = _run(lambda: _client(config, private=True))
    data = _run(lambda: client.open_orders(_otp_params(otp)))
    if not data:
        console.print("No open orders.")
        return
    _print_rows(
        "Open orders",
        ["Order id", "Pair", "Side", "Type", "Price", "Volume", "Status"],
        [
            [k, o.descr.pair, o.descr.kind, o.descr.ordertype, o.descr.price, o.vol, o.status]
            for k, o in sorted(data.items())
        ],
    )


if __name__ == "__main__":
    app()
