"""
Schemas package: data models for the AI News Aggregator.

  - base.py: Category and SourceType enums
  - news.py: Article, CacheEntry
"""

from ainews.schemas.base import Category, DEFAULT_CATEGORY, SourceType
from ainews.schemas.news import Article, CacheEntry

__all__ = [
    "Category", "DEFAULT_CATEGORY", "SourceType",
    "Article", "CacheEntry",
]
