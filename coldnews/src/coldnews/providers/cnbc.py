import logging
import math

import requests

from ..config import get_http_timeout, request_headers
from ..errors import ProviderError

logger = logging.getLogger(__name__)

QUOTE_URL = "https://quote.cnbc.com/quote-html-webservice/quote.htm"


def fetch_last(symbol: str, *, force_refresh: bool = False) -> float:
    """
    Last traded value for a CNBC symbol (e.g. US2Y, .BADI).
    Raises ProviderError when the quote is missing or malformed.
    """
    params = {
        "partnerId": 2,
        "requestMethod": "quick",
        "exthrs": 1,
        "noform": 1,
        "fund": 1,
        "output": "json",
        "symbols": symbol,
    }
    try:
        resp = requests.get(QUOTE_URL, params=params, headers=request_headers(force_refresh), timeout=get_http_timeout())
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise ProviderError(f"CNBC fetch failed for {symbol}: {e}")
    except ValueError as e:
        raise ProviderError(f"CNBC returned invalid JSON for {symbol}: {e}")

    result = data.get("QuickQuoteResult") if isinstance(data, dict) else None
    if not isinstance(result, dict):
        raise ProviderError(f"CNBC payload missing QuickQuoteResult for {symbol}")
    quote = result.get("QuickQuote")
    # Single symbol comes back as an object, sometimes wrapped in a list
    if isinstance(quote, list):
        quote = quote[0] if quote else None
    if not isinstance(quote, dict):
        raise ProviderError(f"CNBC payload missing quote for {symbol}")

    last = quote.get("last")
    try:
        value = float(str(last).replace(",", "").rstrip("%"))
    except (TypeError, ValueError):
        raise ProviderError(f"CNBC last value unparseable for {symbol}: {last!r}")
    if not math.isfinite(value) or value <= 0:
        raise ProviderError(f"CNBC last value out of range for {symbol}: {value}")
    return value


def get_price(symbol: str, fallback: float, *, force_refresh: bool = False) -> float:
    try:
        return fetch_last(symbol, force_refresh=force_refresh)
    except ProviderError as e:
        logger.error(f"{e.message}; using fallback {fallback}")
        return fallback
