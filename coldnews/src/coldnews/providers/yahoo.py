import logging
import math
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from ..config import get_http_timeout, request_headers
from ..errors import ProviderError
from ..models.stats import MarketQuote

logger = logging.getLogger(__name__)

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"


def _usable(value: Any) -> bool:
    """A provider number we are willing to show: finite and positive."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def fetch_chart_meta(symbol: str, range_: str = "1d", *, force_refresh: bool = False) -> Dict[str, Any]:
    """
    Fetch chart metadata (regularMarketPrice, chartPreviousClose, ...) for a symbol.
    Reference: https://query1.finance.yahoo.com/v8/finance/chart/{symbol}
    """
    url = CHART_URL.format(symbol=quote(symbol, safe=""))
    params = {"interval": "1d", "range": range_}

    try:
        resp = requests.get(url, params=params, headers=request_headers(force_refresh), timeout=get_http_timeout())
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise ProviderError(f"Yahoo chart fetch failed for {symbol}: {e}")
    except ValueError as e:
        raise ProviderError(f"Yahoo chart returned invalid JSON for {symbol}: {e}")

    try:
        meta = data["chart"]["result"][0]["meta"]
    except (KeyError, IndexError, TypeError):
        raise ProviderError(f"Yahoo chart payload missing meta for {symbol}")
    if not isinstance(meta, dict):
        raise ProviderError(f"Yahoo chart meta malformed for {symbol}")
    return meta


def get_price(symbol: str, fallback: float, *, force_refresh: bool = False) -> float:
    """Latest market price, or fallback on any failure."""
    try:
        meta = fetch_chart_meta(symbol, force_refresh=force_refresh)
    except ProviderError as e:
        logger.error(f"{e.message}; using fallback {fallback}")
        return fallback

    price = meta.get("regularMarketPrice")
    if not _usable(price):
        logger.warning(f"Yahoo price for {symbol} unusable ({price!r}); using fallback {fallback}")
        return fallback
    return float(price)


def percent_change(price: float, previous_close: Optional[float]) -> float:
    """(price - prev) / prev * 100, zero when prev is missing or zero."""
    if not _usable(previous_close):
        return 0.0
    return (price - previous_close) / previous_close * 100


def get_quote(symbol: str, *, force_refresh: bool = False) -> MarketQuote:
    """Price and percent change; MarketQuote(0, 0) on failure."""
    try:
        meta = fetch_chart_meta(symbol, force_refresh=force_refresh)
    except ProviderError as e:
        logger.error(f"{e.message}; using empty quote")
        return MarketQuote()

    price = meta.get("regularMarketPrice")
    if not _usable(price):
        logger.warning(f"Yahoo quote for {symbol} has no usable price")
        return MarketQuote()

    prev_close = meta.get("chartPreviousClose")
    if prev_close is None:
        prev_close = price
    return MarketQuote(price=float(price), change_percent=percent_change(float(price), prev_close))


def get_five_day_change(symbol: str, *, force_refresh: bool = False) -> Optional[float]:
    """Percent change over the 5-day chart window, None when unavailable."""
    try:
        meta = fetch_chart_meta(symbol, "5d", force_refresh=force_refresh)
    except ProviderError as e:
        logger.error(e.message)
        return None

    price = meta.get("regularMarketPrice")
    prev_close = meta.get("chartPreviousClose")
    if not _usable(price) or not _usable(prev_close):
        return None
    return percent_change(float(price), float(prev_close))
