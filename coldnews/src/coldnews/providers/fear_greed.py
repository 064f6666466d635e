import logging
import math
from typing import Optional

import requests

from ..config import get_http_timeout, request_headers
from ..errors import ProviderError

logger = logging.getLogger(__name__)

CRYPTO_FNG_URL = "https://api.alternative.me/fng/"
CNN_FNG_URL = "https://production.dataviz.cnn.io/index/fearandgreed/graphdata"


def _get_json(url: str, *, params: Optional[dict] = None, force_refresh: bool = False):
    try:
        resp = requests.get(url, params=params, headers=request_headers(force_refresh), timeout=get_http_timeout())
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException as e:
        raise ProviderError(f"Request to {url} failed: {e}")
    except ValueError as e:
        raise ProviderError(f"Invalid JSON from {url}: {e}")


def fetch_crypto_fng(*, force_refresh: bool = False) -> int:
    """
    Crypto Fear & Greed index (0-100) from alternative.me.
    Reference: https://alternative.me/crypto/fear-and-greed-index/#api
    """
    data = _get_json(CRYPTO_FNG_URL, params={"limit": 1}, force_refresh=force_refresh)
    try:
        value = int(data["data"][0]["value"])
    except (KeyError, IndexError, TypeError, ValueError):
        raise ProviderError("alternative.me payload missing data[0].value")
    # 0 means no reading
    if not 0 < value <= 100:
        raise ProviderError(f"alternative.me value out of range: {value}")
    return value


def fetch_cnn_fng(*, force_refresh: bool = False) -> int:
    """CNN stock market Fear & Greed score, rounded."""
    data = _get_json(CNN_FNG_URL, force_refresh=force_refresh)
    block = data.get("fear_and_greed") if isinstance(data, dict) else None
    if not isinstance(block, dict):
        raise ProviderError("CNN payload missing fear_and_greed")
    score = block.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not 0 < score <= 100:
        raise ProviderError(f"CNN fear & greed score unusable: {score!r}")
    # half-up, not banker's rounding
    return int(math.floor(score + 0.5))
