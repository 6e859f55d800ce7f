"""
News aggregator and cache manager.

STATES:
  Fresh           cache populated and younger than the TTL
  Stale-or-Empty  no cache, or expired

get_news(force_refresh) runs a full fetch cycle when forced or stale,
otherwise it serves the cached batch. The cache always holds the raw
(pre-processing) articles; cleaning, classification, dedup and translation
are re-applied on every read, cache hits included.

FALLBACK CHAIN (get_news never raises, never returns an empty list):
  live sources → fresh cache → static sample set
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Any

import httpx

from ainews.config import Settings, get_settings
from ainews.errors import SourceUnavailable, TotalAggregationFailure
from ainews.news.normalizer import deduplicate, normalize_article, passes_length_floor
from ainews.news.sample_articles import get_sample_articles
from ainews.schemas.news import Article, CacheEntry
from ainews.tools.news_sources import SourceAdapter, build_adapters
from ainews.tools.translator import Translator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewsAggregator:
    """
    Multi-source AI news aggregator with a time-boxed cache.

    Usage:
        aggregator = NewsAggregator()
        articles = await aggregator.get_news()
        articles = await aggregator.get_news(force_refresh=True)
        aggregator.clear_cache()
    """

    def __init__(
        self,
        adapters: Optional[List[SourceAdapter]] = None,
        settings: Optional[Settings] = None,
        translator: Optional[Translator] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self.adapters = adapters if adapters is not None else build_adapters(self.settings)
        self.translator = translator or Translator(self.settings, transport=transport)
        self.transport = transport
        self.clock = clock or _utcnow
        self.cache_ttl = timedelta(minutes=self.settings.cache_ttl_minutes)

        self._cache: Optional[CacheEntry] = None
        # Per-source outcome of the last fetch cycle
        self.source_status: Dict[str, Dict[str, Any]] = {}

    # ── Cache lifecycle ──

    @property
    def cache(self) -> Optional[CacheEntry]:
        return self._cache

    def is_cache_valid(self) -> bool:
        """True when a cache entry exists and is younger than the TTL."""
        if self._cache is None:
            return False
        return self.clock() - self._cache.timestamp < self.cache_ttl

    def clear_cache(self):
        self._cache = None
        logger.info("News cache cleared")

    # ── Public entry point ──

    async def get_news(self, force_refresh: bool = False) -> List[Article]:
        """Return processed articles; falls back to cache/sample data on failure."""
        try:
            if not force_refresh and self.is_cache_valid():
                age = self._cache.age_seconds(self.clock())
                logger.debug(f"Serving {len(self._cache.data)} cached articles ({age:.0f}s old)")
                return await self._processed_or_sample(self._cache.data)
            return await self.fetch_news()
        except TotalAggregationFailure as e:
            logger.warning(f"Live fetch failed, using cached/fallback news: {e}")
        except Exception as e:
            logger.exception(f"Unexpected aggregation error, using cached/fallback news: {e}")
        return await self.get_fallback_news()

    async def fetch_news(self) -> List[Article]:
        """
        Run one full fetch cycle.

        Raises TotalAggregationFailure when no adapter produced an article.
        """
        combined = await self._fetch_all_sources()
        if not combined:
            raise TotalAggregationFailure(f"no articles from {len(self.adapters)} sources")

        self._cache = CacheEntry(data=combined, timestamp=self.clock())
        logger.info(f"[NEWS] Cached {len(combined)} raw articles from {len(self.adapters)} sources")
        return await self._processed_or_sample(combined)

    async def get_fallback_news(self) -> List[Article]:
        """Fresh cache when available, otherwise the static sample set."""
        if self.is_cache_valid():
            logger.info("Serving cached news as fallback")
            try:
                return await self._processed_or_sample(self._cache.data)
            except Exception as e:
                logger.exception(f"Cached news unusable, serving sample news: {e}")
        logger.info("Serving static sample news")
        return get_sample_articles(now=self.clock())

    # ── Fetching ──

    async def _fetch_all_sources(self) -> List[Article]:
        """Run every adapter concurrently; one failure never cancels the others."""
        if not self.adapters:
            return []

        headers = {"User-Agent": self.settings.user_agent}
        async with httpx.AsyncClient(
            timeout=self.settings.request_timeout,
            headers=headers,
            transport=self.transport,
        ) as client:
            results = await asyncio.gather(
                *[self._run_adapter(adapter, client) for adapter in self.adapters],
                return_exceptions=True,
            )

        combined: List[Article] = []
        for adapter, result in zip(self.adapters, results):
            if isinstance(result, BaseException):
                self._record_status(adapter.source_id, error=result)
                continue
            self._record_status(adapter.source_id, count=len(result))
            combined.extend(result)
        return combined

    async def _run_adapter(self, adapter: SourceAdapter, client: httpx.AsyncClient) -> List[Article]:
        budget = adapter.time_budget
        try:
            return await asyncio.wait_for(adapter.fetch(client), timeout=budget)
        except asyncio.TimeoutError as e:
            raise SourceUnavailable(adapter.source_id, f"timed out after {budget:g}s") from e

    def _record_status(self, source_id: str, count: int = 0, error: Optional[BaseException] = None):
        if error is None:
            self.source_status[source_id] = {
                "status": "ok",
                "articles": count,
                "error": None,
                "checked_at": self.clock().isoformat(),
            }
            return

        if isinstance(error, SourceUnavailable):
            logger.warning(f"[FAIL] {source_id}: {error.reason}")
        else:
            logger.error(f"[FAIL] {source_id}: unexpected {type(error).__name__}: {error}")
        self.source_status[source_id] = {
            "status": "failed",
            "articles": 0,
            "error": str(error),
            "checked_at": self.clock().isoformat(),
        }

    # ── Processing ──

    async def _processed_or_sample(self, raw: List[Article]) -> List[Article]:
        processed = await self.process_articles(raw)
        if processed:
            return processed
        logger.warning(f"All {len(raw)} articles dropped during processing, serving sample news")
        return get_sample_articles(now=self.clock())

    async def process_articles(self, raw: List[Article]) -> List[Article]:
        """Clean, classify, filter by length, dedup and (optionally) translate."""
        cleaned = []
        for article in raw:
            normalized = normalize_article(article)
            if passes_length_floor(normalized.title, normalized.summary):
                cleaned.append(normalized)

        cleaned = deduplicate(cleaned)

        if not self.settings.translation_enabled:
            return cleaned
        return [await self._translate_article(article) for article in cleaned]

    async def _translate_article(self, article: Article) -> Article:
        title = await self.translator.translate(article.title)
        summary = self.translator.summarize(await self.translator.translate(article.summary))

        # A translation that breaks a length floor keeps the cleaned original
        if not passes_length_floor(title, article.summary):
            title = article.title
        if not passes_length_floor(article.title, summary):
            summary = article.summary

        if title == article.title and summary == article.summary:
            return article
        return article.model_copy(update={
            "title": title,
            "summary": summary,
            "original_title": article.title,
            "original_summary": article.summary,
        })
