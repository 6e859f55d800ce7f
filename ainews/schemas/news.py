"""
News article and cache data models.

Article is the normalized record every source adapter produces and every
caller receives. Python code uses snake_case field names; JSON output uses
the camelCase aliases (publishedAt, imageUrl, ...).

CacheEntry is the raw (pre-processing) batch held by an aggregator.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from .base import Category, DEFAULT_CATEGORY, SourceType


class Article(BaseModel):
    """
    Normalized news item.

    `id` is only unique inside one fetch batch ("{source_id}-{index}").
    `date` is derived from `published_at` when not given explicitly.
    """
    id: str

    # Core content
    title: str
    summary: str
    source: str = ""
    url: str = ""
    category: Category = DEFAULT_CATEGORY
    source_type: SourceType = Field(default=SourceType.API, alias="sourceType")

    # Temporal
    published_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="publishedAt"
    )
    date: str = ""

    # Optional media + forum metadata
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    score: Optional[int] = None
    comments: Optional[int] = None

    # Pre-translation text, kept for traceability
    original_title: Optional[str] = Field(default=None, alias="originalTitle")
    original_summary: Optional[str] = Field(default=None, alias="originalSummary")

    @validator('date', pre=True, always=True)
    def derive_date(cls, v, values):
        if v:
            return v
        published = values.get('published_at') or datetime.now(timezone.utc)
        return published.date().isoformat()

    class Config:
        use_enum_values = True
        populate_by_name = True


@dataclass
class CacheEntry:
    """Raw articles from the last successful aggregation."""
    data: List[Article]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def age_seconds(self, now: datetime) -> float:
        return (now - self.timestamp).total_seconds()
