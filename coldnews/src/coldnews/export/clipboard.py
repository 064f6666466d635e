import datetime
from typing import Dict, List, Optional
from urllib.parse import quote

from ..categories import CATEGORIES
from ..config import get_display_timezone
from ..models.news import NewsItem

SOURCES_LINE = "Sources: CNN, CNBC, Anue, Yahoo Finance, WSJ, Google News"
SEPARATOR = "-" * 40

# category key -> headline placeholder when the category is empty
_LEAD_DEFAULTS = {
    "us": "市場波動",
    "intl": "全球局勢",
    "geo": "地緣動態",
    "tw": "台股表現",
}


def _format_timestamp(now: Optional[datetime.datetime] = None) -> str:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    return now.astimezone(get_display_timezone()).strftime("%Y/%m/%d %H:%M:%S")


def _lead(news: Dict[str, List[NewsItem]], key: str) -> str:
    items = news.get(key) or []
    return items[0].title if items else _LEAD_DEFAULTS[key]


def market_overview(news: Dict[str, List[NewsItem]]) -> str:
    """Opening paragraph quoting the top headline of each main category."""
    return (
        "市場分析報告顯示，今日全球金融體系持續受到多重宏觀因素交互影響。"
        f"首要焦點集中於美國市場，「{_lead(news, 'us')}」消息一出即引發市場關注。"
        f"在國際板塊方面，「{_lead(news, 'intl')}」亦成為重要風向球。"
        f"此外，地緣政治風險未曾消退，「{_lead(news, 'geo')}」局勢發展仍具不確定性。"
        f"回歸台灣市場，「{_lead(news, 'tw')}」議題直接牽動產業鏈敏感神經。"
    )


def format_news_for_clipboard(news: Dict[str, List[NewsItem]]) -> str:
    """Plain-text digest: overview paragraph, then one numbered block per non-empty category."""
    lines = [market_overview(news), ""]

    for key, items in news.items():
        if not items:
            continue
        title = CATEGORIES[key].name if key in CATEGORIES else items[0].category
        lines.append(f"【{title}】")
        for idx, item in enumerate(items, start=1):
            lines.append(f"{idx}. {item.title}")
            lines.append(f"   摘要: {item.summary}")
            lines.append("")
        lines.append(SEPARATOR)
        lines.append("")

    lines.append(SOURCES_LINE)
    return "\n".join(lines)


def email_subject(now: Optional[datetime.datetime] = None) -> str:
    return f"財經新聞摘要 - {_format_timestamp(now)}"


def build_mailto(news: Dict[str, List[NewsItem]], *, to: str = "", now: Optional[datetime.datetime] = None) -> str:
    subject = quote(email_subject(now), safe="")
    body = quote(format_news_for_clipboard(news), safe="")
    return f"mailto:{quote(to, safe='@')}?subject={subject}&body={body}"
