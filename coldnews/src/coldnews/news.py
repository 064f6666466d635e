import concurrent.futures
import datetime
import logging
import re
from email.utils import parsedate_to_datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from .categories import CATEGORIES, CategoryConfig, get_category
from .config import get_display_timezone, get_max_workers
from .errors import ColdNewsError
from .models.news import NewsItem, RawEntry
from .providers import google_news

logger = logging.getLogger(__name__)

NEWS_WINDOW = datetime.timedelta(hours=24)
UNKNOWN_SOURCE = "Unknown"

# Google News appends " - Publisher" to every headline
_TITLE_SOURCE_RE = re.compile(r"(.*) - (.*)$")
_TAG_RE = re.compile(r"<[^>]+>")


def parse_pub_date(value: Optional[str]) -> Optional[datetime.datetime]:
    """RFC 822 (RSS) or ISO-8601 date string to an aware datetime; None if unparseable."""
    if not value or not value.strip():
        return None
    value = value.strip()
    dt = None
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            dt = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def split_title_source(title: str) -> Tuple[str, Optional[str]]:
    """
    Split "<headline> - <publisher>" on the last separator.
    Returns (headline, publisher); publisher is None when there is no suffix.
    """
    m = _TITLE_SOURCE_RE.match(title or "")
    if not m:
        return title or "", None
    return m.group(1), (m.group(2) or None)


def clean_summary(markup: str) -> str:
    """Strip tags and decode &nbsp; / &quot; only."""
    text = _TAG_RE.sub("", markup or "")
    return text.replace("&nbsp;", " ").replace("&quot;", '"')


def format_display_time(dt: datetime.datetime, tz: Optional[ZoneInfo] = None) -> str:
    return dt.astimezone(tz or get_display_timezone()).strftime("%H:%M")


def _epoch_millis(dt: datetime.datetime) -> int:
    return int(dt.timestamp()) * 1000 + dt.microsecond // 1000


def normalize_entry(entry: RawEntry, category_name: str, tz: Optional[ZoneInfo] = None) -> Optional[NewsItem]:
    """Build a NewsItem from a raw entry; None when the publish date cannot be parsed."""
    published_at = parse_pub_date(entry.published)
    if published_at is None:
        logger.debug(f"Dropping entry with unparseable date: {entry.title!r}")
        return None

    title, publisher = split_title_source(entry.title)
    explicit = (entry.source or "").strip()
    source = explicit or publisher or UNKNOWN_SOURCE

    return NewsItem(
        id=entry.guid or entry.link,
        title=title,
        summary=clean_summary(entry.summary),
        source=source,
        link=entry.link,
        time=format_display_time(published_at, tz),
        category=category_name,
        pub_date=_epoch_millis(published_at),
        published_at=published_at,
    )


def filter_recent(
    items: Iterable[NewsItem],
    now: datetime.datetime,
    window: datetime.timedelta = NEWS_WINDOW,
) -> List[NewsItem]:
    """Keep items published strictly after now - window."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    cutoff = now - window
    return [item for item in items if item.published_at > cutoff]


def rank_and_cap(items: Iterable[NewsItem], limit: int) -> List[NewsItem]:
    """Newest first (stable for equal timestamps), truncated to limit."""
    ranked = sorted(items, key=lambda item: item.pub_date, reverse=True)
    return ranked[:max(0, limit)]


def process_feed(
    text: str,
    config: CategoryConfig,
    now: datetime.datetime,
    tz: Optional[ZoneInfo] = None,
) -> List[NewsItem]:
    """Parse, normalize, filter and rank one fetched feed document."""
    tz = tz or get_display_timezone()
    entries = google_news.parse_feed(text)
    normalized = []
    for entry in entries:
        item = normalize_entry(entry, config.name, tz)
        if item is not None:
            normalized.append(item)
    recent = filter_recent(normalized, now)
    return rank_and_cap(recent, config.limit)


def fetch_category_news(
    category: Union[str, CategoryConfig],
    *,
    now: Optional[datetime.datetime] = None,
    force_refresh: bool = False,
    tz: Optional[ZoneInfo] = None,
) -> List[NewsItem]:
    """
    Run the full pipeline for one category.
    Transport and parse failures degrade to an empty list.
    """
    config = category if isinstance(category, CategoryConfig) else get_category(category)
    now = now or datetime.datetime.now(datetime.timezone.utc)

    try:
        text = google_news.fetch_feed(config.query, force_refresh=force_refresh)
        items = process_feed(text, config, now, tz)
    except ColdNewsError as e:
        logger.warning(f"Category {config.key} unavailable: {e.message}")
        return []
    except Exception as e:
        logger.error(f"Category {config.key} pipeline failed: {e}", exc_info=True)
        return []

    logger.info(f"Category {config.key}: {len(items)} items")
    return items


def get_dashboard_news(
    categories: Mapping[str, CategoryConfig] = CATEGORIES,
    *,
    force_refresh: bool = False,
    now: Optional[datetime.datetime] = None,
    max_workers: Optional[int] = None,
) -> Dict[str, List[NewsItem]]:
    """Fetch every category concurrently; result keyed by category in table order."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    tz = get_display_timezone()
    workers = max_workers or min(get_max_workers(), max(1, len(categories)))

    results: Dict[str, List[NewsItem]] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(
                fetch_category_news, config, now=now, force_refresh=force_refresh, tz=tz
            ): key
            for key, config in categories.items()
        }
        for fut in concurrent.futures.as_completed(futures):
            results[futures[fut]] = fut.result()

    return {key: results.get(key, []) for key in categories}
