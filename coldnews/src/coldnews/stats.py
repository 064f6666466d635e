import concurrent.futures
import logging
from typing import Any, Callable, Dict, Optional

from .config import get_max_workers
from .errors import ProviderError
from .models.stats import MarketStats
from .providers import cnbc, fear_greed, yahoo

logger = logging.getLogger(__name__)

VIX_FALLBACK = 20.0
CRYPTO_FNG_FALLBACK = 50
GOLD_SENTIMENT_FALLBACK = 50.0
GOLD_SYMBOL = "GC=F"

# field -> (provider module, symbol, fallback)
PRICE_INDICATORS = {
    "vix": (yahoo, "^VIX", VIX_FALLBACK),
    "us_10y": (yahoo, "^TNX", 4.0),
    "us_2y": (cnbc, "US2Y", 4.0),
    "dollar_index": (yahoo, "DX-Y.NYB", 100.0),
    "brent_crude": (yahoo, "BZ=F", 80.0),
    "gold_price": (yahoo, GOLD_SYMBOL, 2000.0),
    "copper": (yahoo, "HG=F", 3.8),
    "bdi": (cnbc, ".BADI", 1500.0),
    "crb": (yahoo, "^TRCCRB", 270.0),
}

QUOTE_INDICATORS = {
    "sox": "^SOX",
    "sp500": "^GSPC",
    "dji": "^DJI",
    "twii": "^TWII",
}


def clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def vix_fng_proxy(vix: float) -> float:
    """Linear fear & greed proxy from volatility: clamp(0, 100, 110 - 3 * vix)."""
    return clamp(0, 100, 110 - 3 * vix)


def gold_sentiment_from_change(change_percent: float) -> float:
    return clamp(10, 90, 50 + 10 * change_percent)


def get_crypto_fng(*, force_refresh: bool = False) -> int:
    try:
        return fear_greed.fetch_crypto_fng(force_refresh=force_refresh)
    except ProviderError as e:
        logger.error(f"Crypto fear & greed unavailable: {e.message}")
        return CRYPTO_FNG_FALLBACK


def get_stock_fng(vix: float, *, force_refresh: bool = False) -> float:
    """CNN score when reachable, else the VIX proxy."""
    try:
        return fear_greed.fetch_cnn_fng(force_refresh=force_refresh)
    except ProviderError as e:
        logger.warning(f"CNN fear & greed unavailable ({e.message}); using VIX proxy")
    return vix_fng_proxy(vix)


def get_gold_sentiment(*, force_refresh: bool = False) -> float:
    change = yahoo.get_five_day_change(GOLD_SYMBOL, force_refresh=force_refresh)
    if change is None:
        return GOLD_SENTIMENT_FALLBACK
    return gold_sentiment_from_change(change)


def _fan_out(executor, jobs: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
    futures = {executor.submit(job): name for name, job in jobs.items()}
    results = {}
    for fut in concurrent.futures.as_completed(futures):
        results[futures[fut]] = fut.result()
    return results


def get_market_stats(*, force_refresh: bool = False, max_workers: Optional[int] = None) -> MarketStats:
    """
    Fetch every indicator. Phase 1 resolves the independent values (VIX included);
    phase 2 computes the stats that read phase 1 results. Never raises on provider failure.
    """
    phase1: Dict[str, Callable[[], Any]] = {}
    for field, (provider, symbol, fallback) in PRICE_INDICATORS.items():
        phase1[field] = (
            lambda p=provider, s=symbol, f=fallback: p.get_price(s, f, force_refresh=force_refresh)
        )
    for field, symbol in QUOTE_INDICATORS.items():
        phase1[field] = lambda s=symbol: yahoo.get_quote(s, force_refresh=force_refresh)
    phase1["crypto_fng"] = lambda: get_crypto_fng(force_refresh=force_refresh)

    workers = max_workers or get_max_workers()
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        values = _fan_out(executor, phase1)

        vix = values["vix"]
        phase2: Dict[str, Callable[[], Any]] = {
            "stock_fng": lambda: get_stock_fng(vix, force_refresh=force_refresh),
            "gold_sentiment": lambda: get_gold_sentiment(force_refresh=force_refresh),
        }
        values.update(_fan_out(executor, phase2))

    logger.info(f"Market stats: vix={vix} stockFnG={values['stock_fng']} goldSentiment={values['gold_sentiment']}")
    return MarketStats(**values)
