from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedItem(BaseModel):
    """Public-facing feed entry."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    link: str
    description: str = ""
    pub_date: Optional[datetime] = Field(
        default=None,
        alias="pubDate",
        description="Publish date as UTC+8 wall-clock time; omitted when the page has none.",
    )
    author: str = ""


class FeedResult(BaseModel):
    """Feed document returned for /api/v1/neu/yz/{category}."""

    title: str
    description: str
    link: str
    item: List[FeedItem] = Field(default_factory=list)
