from typing import Dict, List, Optional

from ..models.news import NewsItem
from ..models.stats import MarketStats

# (category key, prompt label, items to include)
PROMPT_SECTIONS = [
    ("us", "美國財經焦點", 3),
    ("intl", "國際財經視野", 3),
    ("geo", "全球地緣政治", 2),
    ("tw", "台灣財經要聞", 3),
]


def _headline_lines(items: List[NewsItem], limit: int) -> List[str]:
    return [f"- {item.title} (來源: {item.source})" for item in items[:limit]]


def build_summary_prompt(news: Dict[str, List[NewsItem]], stats: Optional[MarketStats]) -> str:
    """Analyst prompt built from the market stats and the top headlines of each category."""
    lines = []
    lines.append("請擔任一位專業的全球總體經濟分析師，根據以下提供的即時財經新聞與市場數據，撰寫一份「市場總結分析報告」。")
    lines.append("")
    lines.append("**風格要求：**")
    lines.append("1.  **冷靜、客觀、專業**：使用財經專業術語，語氣簡潔有力。")
    lines.append("2.  **注重數據與事實**：分析需基於提供的數據，避免空泛的形容。")
    lines.append("3.  **結構嚴謹**：分為「綜合分析摘要」、「核心市場動態」、「國際視野與地緣政治」、「台灣市場觀察」與「投資建議與展望」五個段落。")
    lines.append("4.  **字數控制**：約 500-600 字。")
    lines.append("5.  **繁體中文** (Traditional Chinese)。")
    lines.append("")

    if stats is not None:
        lines.append("**提供的市場數據 (Market Stats):**")
        lines.append(f"- 恐懼與貪婪指數 (Fear & Greed): {stats.stock_fng:.0f}")
        lines.append(f"- VIX 波動率: {stats.vix:.2f}")
        lines.append(f"- 美元指數: {stats.dollar_index:.2f}")
        lines.append(f"- 10年期公債殖利率: {stats.us_10y:.2f}%")
        lines.append(f"- 黃金價格: {stats.gold_price:.2f}")
        lines.append("")

    lines.append("**提供的即時新聞重點 (News Highlights):**")
    for key, label, limit in PROMPT_SECTIONS:
        lines.append("")
        lines.append(f"[{label}]:")
        lines.extend(_headline_lines(news.get(key) or [], limit))

    lines.append("")
    lines.append("請根據以上資訊，開始撰寫分析報告：")
    return "\n".join(lines)
