"""Typed payloads for the Kraken REST result variants."""

from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from kraken_client.decoding.numeric import DecimalStr, OptionalDecimalStr


class Asset(BaseModel):
    aclass: str
    altname: str
    decimals: int
    display_decimals: int


class AssetPairInfo(BaseModel):
    """
    Full pair description (AssetPairs with info=info or no info param).

    Unknown extra fields are ignored so new optional fields on the wire do
    not break decoding.
    """

    altname: str
    wsname: Optional[str] = None
    aclass_base: str
    base: str
    aclass_quote: str
    quote: str
    lot: Optional[str] = None
    pair_decimals: int
    lot_decimals: int
    lot_multiplier: int
    leverage_buy: List[int]
    leverage_sell: List[int]
    # [[volume, percent fee], ...]
    fees: List[List[float]]
    fees_maker: Optional[List[List[float]]] = None
    fee_volume_currency: str
    margin_call: int
    margin_stop: int
    ordermin: OptionalDecimalStr = None
    costmin: OptionalDecimalStr = None
    tick_size: OptionalDecimalStr = None


class AssetPairFees(BaseModel):
    """AssetPairs with info=fees. Exactly these two fields."""

    model_config = ConfigDict(extra="forbid")

    fees: List[List[float]]
    fee_volume_currency: str


class AssetPairMargin(BaseModel):
    """AssetPairs with info=margin. Exactly these two fields."""

    model_config = ConfigDict(extra="forbid")

    margin_call: int
    margin_level: int


class AssetPairVariant(str, Enum):
    INFO = "info"
    FEES = "fees"
    MARGIN = "margin"


class AssetPairs(BaseModel):
    variant: AssetPairVariant
    pairs: Dict[str, Union[AssetPairInfo, AssetPairFees, AssetPairMargin]]


class Ticker(BaseModel):
    # Ask array (<price>, <whole lot volume>, <lot volume>)
    a: List[DecimalStr]
    # Bid array (<price>, <whole lot volume>, <lot volume>)
    b: List[DecimalStr]
    # Last trade closed array (<price>, <lot volume>)
    c: List[DecimalStr]
    # Volume array (<today>, <last 24 hours>)
    v: List[DecimalStr]
    # Volume weighted average price array (<today>, <last 24 hours>)
    p: List[DecimalStr]
    # Number of trades array (<today>, <last 24 hours>)
    t: List[int]
    # Low array (<today>, <last 24 hours>)
    l: List[DecimalStr]
    # High array (<today>, <last 24 hours>)
    h: List[DecimalStr]
    # Today's opening price
    o: DecimalStr

    @property
    def ask(self) -> float:
        return self.a[0]

    @property
    def bid(self) -> float:
        return self.b[0]

    @property
    def last(self) -> float:
        return self.c[0]


# (<price>, <volume>, <timestamp>)
BookLevel = Tuple[DecimalStr, DecimalStr, int]


class OrderBook(BaseModel):
    asks: List[BookLevel]
    bids: List[BookLevel]

    @property
    def best_ask(self) -> Optional[BookLevel]:
        return self.asks[0] if self.asks else None

    @property
    def best_bid(self) -> Optional[BookLevel]:
        return self.bids[0] if self.bids else None


class TradeBalance(BaseModel):
    # Equivalent balance (combined balance of all currencies)
    eb: DecimalStr
    # Trade balance (combined balance of all equity currencies)
    tb: DecimalStr
    # Margin amount of open positions
    m: DecimalStr
    # Unrealized net profit/loss of open positions
    n: DecimalStr
    # Cost basis of open positions
    c: DecimalStr
    # Current floating valuation of open positions
    v: DecimalStr
    # Equity = trade balance + unrealized net profit/loss
    e: DecimalStr
    # Free margin = equity - initial margin
    mf: DecimalStr
    # Margin level = (equity / initial margin) * 100; absent with no open positions
    ml: OptionalDecimalStr = None


class OrderDescription(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pair: str
    # buy / sell
    kind: str = Field(alias="type")
    # market, limit, stop-loss, take-profit, trailing-stop, settle-position, ...
    ordertype: str
    price: DecimalStr
    price2: DecimalStr
    leverage: str
    order: str
    # Conditional close order description, empty when not set
    close: Optional[str] = None


class OpenOrder(BaseModel):
    refid: Optional[str] = None
    userref: Optional[int] = None
    # pending / open / closed / canceled / expired
    status: str
    opentm: float
    starttm: float
    expiretm: float
    descr: OrderDescription
    vol: DecimalStr
    vol_exec: DecimalStr
    cost: DecimalStr
    fee: DecimalStr
    price: DecimalStr
    stopprice: DecimalStr
    limitprice: DecimalStr
    # Comma delimited: stopped, touched, liquidated, partial
    misc: str
    # Comma delimited: viqc, fcib, fciq, nompp, post
    oflags: str
    trades: Optional[List[str]] = None
