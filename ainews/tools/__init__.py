"""
Outbound integrations.

Modules:
- news_sources: NewsAPI / GNews / RSS / Hacker News adapters
- translator: memoizing translator (API + term table)
"""

from ainews.tools.news_sources import (
    ADAPTERS,
    GNewsAdapter,
    HackerNewsAdapter,
    NewsAPIAdapter,
    RSSFeedAdapter,
    SourceAdapter,
    build_adapters,
    is_ai_related,
)
from ainews.tools.translator import Translator
