from pydantic import BaseModel, ConfigDict, Field

class MarketQuote(BaseModel):
    """
    Price plus percent change versus previous close.
    """
    model_config = ConfigDict(populate_by_name=True)

    price: float = 0.0
    change_percent: float = Field(default=0.0, alias="changePercent")

class MarketStats(BaseModel):
    """
    Snapshot of independently sourced indicators. Each field is defaulted
    on its own; there is no cross-field consistency.
    """
    model_config = ConfigDict(populate_by_name=True)

    vix: float
    stock_fng: float = Field(alias="stockFnG")
    crypto_fng: float = Field(alias="cryptoFnG")
    gold_sentiment: float = Field(alias="goldSentiment")

    us_10y: float = Field(alias="us10Y")
    us_2y: float = Field(alias="us2Y")
    dollar_index: float = Field(alias="dollarIndex")
    brent_crude: float = Field(alias="brentCrude")
    gold_price: float = Field(alias="goldPrice")
    copper: float
    bdi: float
    crb: float

    sox: MarketQuote
    sp500: MarketQuote
    dji: MarketQuote
    twii: MarketQuote
