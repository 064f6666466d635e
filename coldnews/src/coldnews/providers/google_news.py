import io
import logging
from typing import List
from urllib.parse import quote

import feedparser
import requests

from ..config import get_http_timeout, request_headers
from ..errors import ProviderError
from ..models.news import RawEntry

logger = logging.getLogger(__name__)

BASE_URL = "https://news.google.com/rss/search"
# Taiwan edition, Traditional Chinese results
EDITION_PARAMS = "hl=zh-TW&gl=TW&ceid=TW:zh-Hant"


def build_search_url(query: str) -> str:
    return f"{BASE_URL}?q={quote(query, safe='')}&{EDITION_PARAMS}"


def fetch_feed(query: str, *, force_refresh: bool = False) -> str:
    """
    Fetch the RSS search feed for a query.
    Reference: https://news.google.com/rss/search?q=...
    """
    url = build_search_url(query)
    try:
        resp = requests.get(url, headers=request_headers(force_refresh), timeout=get_http_timeout())
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Google News request failed for {query!r}: {e}")
        raise ProviderError(f"Google News fetch failed: {e}", {"url": url})

    # Feeds are always UTF-8; requests guesses ISO-8859-1 when the header omits a charset
    if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
        resp.encoding = "utf-8"
    return resp.text


def parse_feed(text: str) -> List[RawEntry]:
    """Decode an RSS document into raw entries."""
    parsed = feedparser.parse(io.BytesIO((text or "").encode("utf-8")))

    # feedparser is lenient: a bozo document with entries is still usable
    if parsed.get("bozo") and not parsed.entries:
        exc = parsed.get("bozo_exception")
        raise ProviderError(f"Malformed feed: {exc}")
    if not parsed.get("version") and not parsed.entries:
        raise ProviderError("Document is not a syndication feed")

    entries = []
    for entry in parsed.entries:
        source = entry.get("source") or {}
        entries.append(RawEntry(
            title=entry.get("title", ""),
            source=source.get("title") if isinstance(source, dict) else None,
            link=entry.get("link", ""),
            summary=entry.get("summary", ""),
            guid=entry.get("id"),
            published=entry.get("published"),
        ))
    return entries
