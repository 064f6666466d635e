from pathlib import Path
from types import MappingProxyType
from typing import Mapping
import yaml
from pydantic import BaseModel, ConfigDict
from .errors import ValidationError


class CategoryConfig(BaseModel):
    """One news topic bucket: Google News query, item cap and display name."""
    model_config = ConfigDict(frozen=True)

    key: str
    query: str
    limit: int
    name: str


def _table(*configs: CategoryConfig) -> Mapping[str, CategoryConfig]:
    return MappingProxyType({c.key: c for c in configs})


CATEGORIES: Mapping[str, CategoryConfig] = _table(
    CategoryConfig(
        key="us",
        query="美國財經 OR 美股 OR 聯準會 OR Fed OR 美債",
        limit=10,
        name="美國財經焦點",
    ),
    CategoryConfig(
        key="intl",
        query="中國經濟 OR 歐洲市場 OR 日韓股市 OR 新興市場 -美國 -台灣",
        limit=10,
        name="國際財經視野",
    ),
    CategoryConfig(
        key="geo",
        query="地緣政治 OR 烏克蘭戰爭 OR 以巴衝突 OR 南海爭議 OR 軍事動態",
        limit=5,
        name="全球地緣政治與軍事",
    ),
    CategoryConfig(
        key="tw",
        query="台股 OR 半導體 OR AI供應鏈 OR 台灣經濟政策",
        limit=10,
        name="台灣財經要聞",
    ),
    CategoryConfig(
        key="crypto",
        query="加密貨幣 OR 比特幣 OR 以太幣 OR 虛擬貨幣",
        limit=10,
        name="加密貨幣快訊",
    ),
)


def get_category(key: str, categories: Mapping[str, CategoryConfig] = CATEGORIES) -> CategoryConfig:
    config = categories.get((key or "").strip().lower())
    if config is None:
        raise ValidationError(
            f"Unknown category: {key}",
            {"known": list(categories.keys())},
        )
    return config


def load_categories(path: str = "categories.yaml") -> Mapping[str, CategoryConfig]:
    """
    Load a category table from YAML.
    Expected shape:
      categories:
        us:
          query: "美股 OR Fed"
          limit: 10
          name: "美國財經焦點"
    """
    p = Path(path)
    if not p.exists():
        raise ValidationError(f"Categories file not found: {path}")

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid categories YAML: {e}")

    raw = data.get("categories") if isinstance(data, dict) else None
    if not isinstance(raw, dict) or not raw:
        raise ValidationError("Categories file must contain a non-empty 'categories' object.")

    configs = []
    for key, spec in raw.items():
        if not isinstance(spec, dict):
            raise ValidationError(f"Category '{key}' must be an object.")
        query = spec.get("query")
        limit = spec.get("limit", 10)
        if not isinstance(query, str) or not query.strip():
            raise ValidationError(f"Category '{key}' needs a non-empty 'query'.")
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise ValidationError(f"Category '{key}' limit must be a positive integer.")
        configs.append(CategoryConfig(
            key=str(key).strip().lower(),
            query=query.strip(),
            limit=limit,
            name=spec.get("name") or str(key),
        ))

    return _table(*configs)
