from pathlib import Path
from typing import Dict, List, Optional

from ..categories import CATEGORIES
from ..models.news import NewsItem
from ..models.stats import MarketQuote, MarketStats


def _quote_line(label: str, quote: MarketQuote) -> str:
    sign = "+" if quote.change_percent >= 0 else ""
    return f"- {label}: {quote.price:,.2f} ({sign}{quote.change_percent:.2f}%)"


def render_stats_md(stats: MarketStats) -> List[str]:
    lines = []
    lines.append("## Market Gauges")
    lines.append(f"- Stock Fear & Greed: {stats.stock_fng:.0f}")
    lines.append(f"- Crypto Fear & Greed: {stats.crypto_fng:.0f}")
    lines.append(f"- Gold Sentiment: {stats.gold_sentiment:.0f}")
    lines.append(f"- VIX: {stats.vix:.2f}")
    lines.append("")

    lines.append("## Macro")
    lines.append(f"- US 10Y: {stats.us_10y:.2f}%")
    lines.append(f"- US 2Y: {stats.us_2y:.2f}%")
    lines.append(f"- Dollar Index: {stats.dollar_index:.2f}")
    lines.append(f"- Brent Crude: {stats.brent_crude:.2f}")
    lines.append(f"- Gold: {stats.gold_price:,.2f}")
    lines.append(f"- Copper: {stats.copper:.2f}")
    lines.append(f"- BDI: {stats.bdi:,.0f}")
    lines.append(f"- CRB: {stats.crb:.2f}")
    lines.append("")

    lines.append("## Indices")
    lines.append(_quote_line("SOX", stats.sox))
    lines.append(_quote_line("S&P 500", stats.sp500))
    lines.append(_quote_line("Dow Jones", stats.dji))
    lines.append(_quote_line("TAIEX", stats.twii))
    lines.append("")
    return lines


def render_news_md(news: Dict[str, List[NewsItem]]) -> List[str]:
    lines = []
    for key, items in news.items():
        title = CATEGORIES[key].name if key in CATEGORIES else key
        lines.append(f"## {title}")
        if not items:
            lines.append("_No news in the last 24 hours._")
            lines.append("")
            continue
        for item in items:
            lines.append(f"### {item.title}")
            lines.append(f"**Source**: {item.source} | **Time**: {item.time}")
            if item.summary:
                lines.append("")
                lines.append(item.summary)
            lines.append(f"[Read Article]({item.link})")
            lines.append("")
    return lines


def export_dashboard_md(
    news: Dict[str, List[NewsItem]],
    stats: Optional[MarketStats],
    path: Path,
    *,
    title: str = "即時財經新聞摘要",
    generated_at: str = "",
):
    """Export a dashboard snapshot to Markdown."""
    lines = [f"# {title}"]
    if generated_at:
        lines.append(f"**Updated**: {generated_at}")
    lines.append("")

    if stats is not None:
        lines.extend(render_stats_md(stats))
    lines.extend(render_news_md(news))

    with open(path, 'w', encoding='utf-8') as f:
        f.write("\n".join(lines))
