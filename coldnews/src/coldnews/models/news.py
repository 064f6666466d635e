from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class RawEntry(BaseModel):
    """
    One feed entry as decoded by the parser, before any cleanup.
    """
    title: str = ""
    source: Optional[str] = None
    link: str = ""
    summary: str = ""
    guid: Optional[str] = None
    published: Optional[str] = None

class NewsItem(BaseModel):
    """
    Normalized news item, one per retained feed entry.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str  # guid, else link
    title: str
    summary: str
    source: str
    link: str
    time: str  # HH:MM display time
    category: str  # display name
    pub_date: int = Field(alias="pubDate")  # epoch milliseconds, ordering only

    published_at: datetime = Field(exclude=True)
