import pytest
from typer.testing import CliRunner

from conftest import SECRET, FakeTransport, envelope
from kraken_client import cli
from kraken_client.api.client import KrakenClient

runner = CliRunner()


@pytest.fixture
def fake_transport(monkeypatch):
    holder = {}

    def install(*responses):
        transport = FakeTransport(*responses)
        holder["transport"] = transport
        monkeypatch.setattr(
            cli, "KrakenClient", lambda **kw: KrakenClient(transport=transport, **kw)
        )
        return transport

    return install


@pytest.fixture
def kraken_env(monkeypatch):
    monkeypatch.setenv("KRAKEN_API_KEY", "cli-key")
    monkeypatch.setenv("KRAKEN_SECRET_KEY", SECRET)


def test_ticker(fake_transport, ticker_payload):
    transport = fake_transport(envelope(ticker_payload))
    result = runner.invoke(cli.app, ["ticker", "XBTUSD"])
    assert result.exit_code == 0, result.output
    assert "XXBTZUSD" in result.output
    assert "30303.2" in result.output
    assert transport.calls[0]["body"] == {"pair": "XBTUSD"}


def test_asset_pairs_margin(fake_transport):
    transport = fake_transport(envelope({"XXBTZUSD": {"margin_call": 80, "margin_level": 140}}))
    result = runner.invoke(cli.app, ["asset-pairs", "--info", "margin"])
    assert result.exit_code == 0, result.output
    assert "140" in result.output
    assert transport.calls[0]["body"] == {"info": "margin"}


def test_exchange_error_exits_nonzero(fake_transport):
    fake_transport(b'{"error":["EQuery:Unknown asset pair"],"result":null}')
    result = runner.invoke(cli.app, ["ticker", "NOPE"])
    assert result.exit_code == 1
    assert "EQuery:Unknown asset pair" in result.output


def test_balance_requires_credentials(fake_transport, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    transport = fake_transport(envelope({}))
    result = runner.invoke(cli.app, ["balance"])
    assert result.exit_code == 1
    assert transport.calls == []


def test_balance(fake_transport, kraken_env):
    transport = fake_transport(envelope({"ZUSD": "171288.6158"}))
    result = runner.invoke(cli.app, ["balance", "--otp", "123456"])
    assert result.exit_code == 0, result.output
    assert "171288.6158" in result.output
    call = transport.calls[0]
    assert call["headers"]["API-Key"] == "cli-key"
    assert call["body"].endswith("&otp=123456")


def test_open_orders_empty(fake_transport, kraken_env):
    fake_transport(envelope({"open": {}}))
    result = runner.invoke(cli.app, ["open-orders"])
    assert result.exit_code == 0, result.output
    assert "No open orders" in result.output


def test_trade_balance_shows_missing_margin_level(fake_transport, kraken_env, trade_balance_payload):
    del trade_balance_payload["ml"]
    fake_transport(envelope(trade_balance_payload))
    result = runner.invoke(cli.app, ["trade-balance"])
    assert result.exit_code == 0, result.output
    assert "Margin level" in result.output
