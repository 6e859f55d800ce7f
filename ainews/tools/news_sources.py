"""
Source adapters: one per upstream family.

  - NewsAPIAdapter:   NewsAPI.org /v2/everything (keyed)
  - GNewsAdapter:     GNews /api/v4/search (keyed)
  - RSSFeedAdapter:   every feed in FEED_SOURCES, fetched one after another
  - HackerNewsAdapter: HN top stories + per-story detail lookups

Each adapter turns its payload into Article objects. A whole-source failure
raises SourceUnavailable; a single malformed record is skipped.
Adapters hold no cache state. The aggregator owns the httpx client and
passes it to fetch().
"""

import asyncio
import logging
import random
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from ainews.config import (
    AI_KEYWORDS,
    AI_PLATFORM_KEYWORDS,
    FEED_SOURCES,
    GNEWS_KEY_PLACEHOLDER,
    GNEWS_URL,
    HN_DISCUSSION_URL,
    HN_ITEM_URL,
    HN_TOP_STORIES_URL,
    NEWSAPI_KEY_PLACEHOLDER,
    NEWSAPI_URL,
    Settings,
    get_settings,
    is_key_configured,
)
from ainews.errors import ParseFailure, SourceUnavailable
from ainews.news.feed_parser import parse_feed, strip_markup
from ainews.schemas.base import SourceType
from ainews.schemas.news import Article

logger = logging.getLogger(__name__)

_AI_KEYWORD_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(k) for k in AI_KEYWORDS) + r")\b", re.IGNORECASE
)

# Providers cap free-tier pages; stay inside what both accept
MIN_PAGE_SIZE = 20
MAX_PAGE_SIZE = 30


def is_ai_related(text: str) -> bool:
    """True when text mentions any AI/ML keyword."""
    return bool(_AI_KEYWORD_RE.search(text or ""))


def build_query() -> str:
    """'artificial intelligence OR "machine learning" OR ChatGPT ...'"""
    terms = ["artificial intelligence"]
    for keyword in AI_PLATFORM_KEYWORDS:
        terms.append(f'"{keyword}"' if " " in keyword else keyword)
    return " OR ".join(terms)


def parse_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """Parse the date formats our providers emit. None when unparseable."""
    if not date_str:
        return None
    date_str = date_str.strip()

    try:
        parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    except ValueError:
        pass

    formats = [
        "%a, %d %b %Y %H:%M:%S %z",
        "%a, %d %b %Y %H:%M:%S GMT",
        "%a, %d %b %Y %H:%M:%S %Z",
        "%d %b %Y %H:%M:%S %z",
        "%Y-%m-%d %H:%M:%S",
    ]
    for fmt in formats:
        try:
            parsed = datetime.strptime(date_str, fmt)
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    return None


def _published_or_now(date_str: Optional[str]) -> datetime:
    return parse_datetime(date_str) or datetime.now(timezone.utc)


async def _get(client: httpx.AsyncClient, source_id: str, url: str, **kwargs) -> httpx.Response:
    """GET that converts every HTTP/transport problem into SourceUnavailable."""
    try:
        response = await client.get(url, **kwargs)
        response.raise_for_status()
        return response
    except httpx.HTTPStatusError as e:
        raise SourceUnavailable(source_id, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise SourceUnavailable(source_id, f"{type(e).__name__}: {e}") from e


def _get_json(response: httpx.Response, source_id: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise SourceUnavailable(source_id, "response is not JSON") from e


# =============================================================================
# BASE
# =============================================================================

class SourceAdapter(ABC):
    """Base class for all news source adapters."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Unique identifier for this source"""

    @abstractmethod
    async def fetch(self, client: httpx.AsyncClient) -> List[Article]:
        """Fetch and map articles. Raises SourceUnavailable on failure."""

    @property
    def time_budget(self) -> float:
        """Overall seconds the aggregator allows one fetch() call."""
        return self.settings.source_timeout


class KeyedNewsAdapter(SourceAdapter):
    """Shared flow for the keyed REST providers: key check, GET, map items."""

    endpoint: str = ""
    placeholder: str = ""
    default_source_name: str = ""

    @property
    @abstractmethod
    def api_key(self) -> str:
        """Configured credential"""

    @abstractmethod
    def build_params(self) -> Dict[str, Any]:
        """Provider query parameters (credential included)."""

    @abstractmethod
    def map_item(self, item: Dict[str, Any], index: int) -> Article:
        """Map one payload record. Raises ParseFailure for unusable records."""

    @property
    def page_size(self) -> int:
        return max(MIN_PAGE_SIZE, min(self.settings.page_size, MAX_PAGE_SIZE))

    async def fetch(self, client: httpx.AsyncClient) -> List[Article]:
        if not is_key_configured(self.api_key, self.placeholder):
            raise SourceUnavailable(self.source_id, "API key not configured")

        response = await _get(client, self.source_id, self.endpoint, params=self.build_params())
        data = _get_json(response, self.source_id)
        items = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise SourceUnavailable(self.source_id, "payload has no article list")

        articles = []
        for index, item in enumerate(items):
            try:
                articles.append(self.map_item(item, index))
            except (ParseFailure, ValueError, TypeError, AttributeError) as e:
                logger.debug(f"{self.source_id}: skipped record {index}: {e}")

        logger.info(f"[OK] {self.source_id}: {len(articles)} articles")
        return articles

    def _common_fields(self, item: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(item, dict):
            raise ParseFailure("record is not an object")
        title = (item.get("title") or "").strip()
        summary = (item.get("description") or item.get("content") or "").strip()
        if not title or not summary or title == "[Removed]":
            raise ParseFailure("missing title or summary")

        src = item.get("source")
        source_name = src.get("name") if isinstance(src, dict) else src
        return {
            "title": title,
            "summary": summary,
            "source": source_name or self.default_source_name,
            "url": item.get("url") or "",
            "published_at": _published_or_now(item.get("publishedAt")),
            "source_type": SourceType.API,
        }


# =============================================================================
# SOURCE ADAPTER IMPLEMENTATIONS
# =============================================================================

class NewsAPIAdapter(KeyedNewsAdapter):
    """NewsAPI.org /v2/everything."""

    endpoint = NEWSAPI_URL
    placeholder = NEWSAPI_KEY_PLACEHOLDER
    default_source_name = "News API"

    @property
    def source_id(self) -> str:
        return "newsapi"

    @property
    def api_key(self) -> str:
        return self.settings.newsapi_key

    def build_params(self) -> Dict[str, Any]:
        return {
            "q": build_query(),
            "language": "en",
            "sortBy": "publishedAt",
            "pageSize": self.page_size,
            "apiKey": self.api_key,
        }

    def map_item(self, item: Dict[str, Any], index: int) -> Article:
        fields = self._common_fields(item)
        return Article(id=f"{self.source_id}-{index}", image_url=item.get("urlToImage"), **fields)


class GNewsAdapter(KeyedNewsAdapter):
    """GNews /api/v4/search."""

    endpoint = GNEWS_URL
    placeholder = GNEWS_KEY_PLACEHOLDER
    default_source_name = "GNews"

    @property
    def source_id(self) -> str:
        return "gnews"

    @property
    def api_key(self) -> str:
        return self.settings.gnews_api_key

    def build_params(self) -> Dict[str, Any]:
        return {
            "q": build_query(),
            "lang": "en",
            "country": "us",
            "max": self.page_size,
            "apikey": self.api_key,
        }

    def map_item(self, item: Dict[str, Any], index: int) -> Article:
        fields = self._common_fields(item)
        return Article(id=f"{self.source_id}-{index}", image_url=item.get("image"), **fields)


class RSSFeedAdapter(SourceAdapter):
    """
    Sequential RSS/Atom fetcher over FEED_SOURCES.

    One broken feed is logged and skipped; the adapter only fails when
    every feed failed. Items without an AI keyword are admitted with
    probability `admit_probability` so some general-tech stories get through.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        feeds: Optional[Dict[str, Dict[str, str]]] = None,
        admit_probability: Optional[float] = None,
        rng: Optional[random.Random] = None,
        delay_seconds: Optional[float] = None,
    ):
        super().__init__(settings)
        self.feeds = feeds if feeds is not None else FEED_SOURCES
        self.admit_probability = (
            self.settings.feed_admit_probability if admit_probability is None else admit_probability
        )
        self.rng = rng or random.Random()
        self.delay_seconds = (
            self.settings.feed_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.feed_timeout = self.settings.feed_timeout

    @property
    def source_id(self) -> str:
        return "rss"

    @property
    def time_budget(self) -> float:
        # Feeds run one after another, each with its own timeout
        per_feed = self.feed_timeout + self.delay_seconds
        return max(self.settings.source_timeout, per_feed * len(self.feeds))

    def _is_admitted(self, title: str, description: str) -> bool:
        if is_ai_related(f"{title} {description}"):
            return True
        return self.rng.random() < self.admit_probability

    async def fetch(self, client: httpx.AsyncClient) -> List[Article]:
        articles: List[Article] = []
        failures = 0

        for position, (feed_id, feed) in enumerate(self.feeds.items()):
            if position > 0 and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)
            try:
                articles.extend(await self._fetch_feed_bounded(client, feed_id, feed))
            except SourceUnavailable as e:
                failures += 1
                logger.warning(f"[FAIL] {feed.get('name', feed_id)}: {e.reason}")

        if self.feeds and failures == len(self.feeds):
            raise SourceUnavailable(self.source_id, f"all {failures} feeds failed")

        logger.info(f"[OK] {self.source_id}: {len(articles)} articles from {len(self.feeds) - failures} feeds")
        return articles

    async def _fetch_feed_bounded(
        self, client: httpx.AsyncClient, feed_id: str, feed: Dict[str, str]
    ) -> List[Article]:
        try:
            return await asyncio.wait_for(self._fetch_feed(client, feed_id, feed), timeout=self.feed_timeout)
        except asyncio.TimeoutError as e:
            raise SourceUnavailable(feed_id, f"timed out after {self.feed_timeout:g}s") from e

    async def _fetch_feed(self, client: httpx.AsyncClient, feed_id: str, feed: Dict[str, str]) -> List[Article]:
        rss_url = feed.get("rss_url")
        if not rss_url:
            raise SourceUnavailable(feed_id, "no rss_url configured")

        response = await _get(
            client, feed_id, rss_url,
            headers={"User-Agent": self.settings.user_agent},
            follow_redirects=True,
        )
        items = parse_feed(response.text, max_items=self.settings.feed_max_items)

        articles = []
        for index, item in enumerate(items):
            if not self._is_admitted(item.title, item.description):
                continue
            articles.append(Article(
                id=f"rss-{feed_id}-{index}",
                title=item.title,
                summary=item.description,
                source=feed.get("name", feed_id),
                url=item.link,
                published_at=_published_or_now(item.pub_date),
                image_url=item.image_url,
                source_type=SourceType.RSS,
            ))

        logger.debug(f"{feed.get('name', feed_id)}: kept {len(articles)}/{len(items)} items")
        return articles


class HackerNewsAdapter(SourceAdapter):
    """Hacker News top stories filtered to AI/ML titles."""

    def __init__(self, settings: Optional[Settings] = None, top_n: Optional[int] = None):
        super().__init__(settings)
        self.top_n = self.settings.hn_top_n if top_n is None else top_n

    @property
    def source_id(self) -> str:
        return "hackernews"

    async def fetch(self, client: httpx.AsyncClient) -> List[Article]:
        response = await _get(client, self.source_id, HN_TOP_STORIES_URL)
        story_ids = _get_json(response, self.source_id)
        if not isinstance(story_ids, list):
            raise SourceUnavailable(self.source_id, "top stories payload is not a list")

        story_ids = story_ids[:self.top_n]
        results = await asyncio.gather(
            *[self._fetch_story(client, sid) for sid in story_ids],
            return_exceptions=True,
        )

        articles = []
        for story in results:
            if isinstance(story, BaseException) or not story:
                continue
            try:
                article = self._map_story(story, len(articles))
            except (ParseFailure, ValueError, TypeError, AttributeError) as e:
                logger.debug(f"hackernews: skipped story {story.get('id')}: {e}")
                continue
            if article is not None:
                articles.append(article)

        logger.info(f"[OK] {self.source_id}: {len(articles)} AI stories from top {len(story_ids)}")
        return articles

    async def _fetch_story(self, client: httpx.AsyncClient, story_id: Any) -> Optional[Dict[str, Any]]:
        try:
            response = await _get(client, self.source_id, HN_ITEM_URL.format(id=story_id))
            story = response.json()
        except (SourceUnavailable, ValueError) as e:
            logger.debug(f"hackernews: story {story_id} unavailable: {e}")
            return None
        return story if isinstance(story, dict) else None

    def _map_story(self, story: Dict[str, Any], index: int) -> Optional[Article]:
        title = (story.get("title") or "").strip()
        if not title:
            raise ParseFailure("story without title")
        if not is_ai_related(title):
            return None

        story_id = story.get("id")
        try:
            score = int(story.get("score") or 0)
            comments = int(story.get("descendants") or 0)
        except (TypeError, ValueError) as e:
            raise ParseFailure(f"bad score/comment count: {e}") from e
        summary = strip_markup(story.get("text") or "")
        if not summary:
            summary = f"Hacker News discussion with {score} points and {comments} comments: {title}"

        published = datetime.now(timezone.utc)
        if story.get("time"):
            try:
                published = datetime.fromtimestamp(int(story["time"]), tz=timezone.utc)
            except (TypeError, ValueError, OverflowError):
                pass

        return Article(
            id=f"{self.source_id}-{index}",
            title=title,
            summary=summary,
            source="Hacker News",
            url=story.get("url") or HN_DISCUSSION_URL.format(id=story_id),
            published_at=published,
            score=score,
            comments=comments,
            source_type=SourceType.FORUM,
        )


# Adapter id → class, used by the aggregator to build the enabled set
ADAPTERS = {
    "newsapi": NewsAPIAdapter,
    "gnews": GNewsAdapter,
    "rss": RSSFeedAdapter,
    "hackernews": HackerNewsAdapter,
}


def build_adapters(settings: Optional[Settings] = None) -> List[SourceAdapter]:
    """Instantiate every adapter listed in ENABLED_SOURCES."""
    settings = settings or get_settings()
    adapters = []
    for source_id in settings.get_enabled_sources():
        adapter_cls = ADAPTERS.get(source_id)
        if adapter_cls is None:
            logger.warning(f"Unknown source in ENABLED_SOURCES: {source_id}")
            continue
        adapters.append(adapter_cls(settings=settings))
    return adapters
