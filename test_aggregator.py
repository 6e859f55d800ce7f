"""
Tests for NewsAggregator

Tests cover:
- Cache hit / TTL expiry / forced refresh
- All-settled fan-out (one failing or slow source never sinks the rest)
- Fallback chain: live → fresh cache → static sample set
- Processing on every read (cleaning, length floors, dedup, translation)
"""

import asyncio

import httpx

from ainews.aggregator import NewsAggregator
from ainews.errors import SourceUnavailable
from ainews.news.sample_articles import SAMPLE_ARTICLES_RAW
from ainews.schemas.base import Category
from ainews.tools.news_sources import RSSFeedAdapter
from ainews.tools.translator import Translator


def _aggregator(settings, adapters, clock, translator=None):
    return NewsAggregator(adapters=adapters, settings=settings, translator=translator, clock=clock)


def _assert_invariants(articles):
    assert articles
    categories = {c.value for c in Category}
    for article in articles:
        assert len(article.title) > 10
        assert len(article.summary) > 20
        assert article.category in categories


# =============================================================================
# CACHE LIFECYCLE
# =============================================================================

class TestCache:

    async def test_second_read_within_ttl_does_not_refetch(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")])
        aggregator = _aggregator(settings, [adapter], clock)

        first = await aggregator.get_news()
        clock.advance(minutes=29)
        second = await aggregator.get_news()

        assert adapter.calls == 1
        assert [a.title for a in first] == [a.title for a in second]

    async def test_expired_cache_refetches(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")])
        aggregator = _aggregator(settings, [adapter], clock)

        await aggregator.get_news()
        clock.advance(minutes=30)

        assert not aggregator.is_cache_valid()
        await aggregator.get_news()
        assert adapter.calls == 2

    async def test_force_refresh_refetches(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")])
        aggregator = _aggregator(settings, [adapter], clock)

        await aggregator.get_news()
        await aggregator.get_news(force_refresh=True)

        assert adapter.calls == 2

    async def test_clear_cache(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")])
        aggregator = _aggregator(settings, [adapter], clock)

        await aggregator.get_news()
        assert aggregator.is_cache_valid()

        aggregator.clear_cache()

        assert not aggregator.is_cache_valid()
        assert aggregator.cache is None
        await aggregator.get_news()
        assert adapter.calls == 2

    async def test_cache_holds_raw_articles(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("BREAKING: OpenAI launches new model today")])
        aggregator = _aggregator(settings, [adapter], clock)

        articles = await aggregator.get_news()

        assert articles[0].title == "OpenAI launches new model today"
        assert aggregator.cache.data[0].title == "BREAKING: OpenAI launches new model today"
        assert aggregator.cache.timestamp == clock.now


# =============================================================================
# FAN-OUT + FALLBACK
# =============================================================================

class TestFetchAndFallback:

    async def test_results_concatenated_in_adapter_order(self, settings, clock, fake_adapter, make_article):
        adapters = [
            fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")]),
            fake_adapter("rss", [make_article("Anthropic expands Claude availability")]),
        ]
        articles = await _aggregator(settings, adapters, clock).get_news()

        assert [a.title for a in articles] == [
            "OpenAI launches new model for developers",
            "Anthropic expands Claude availability",
        ]
        _assert_invariants(articles)

    async def test_one_failing_source_is_isolated(self, settings, clock, fake_adapter, make_article):
        adapters = [
            fake_adapter("newsapi", error=SourceUnavailable("newsapi", "HTTP 429")),
            fake_adapter("hackernews", error=RuntimeError("boom")),
            fake_adapter("rss", [make_article("Nvidia unveils next generation AI chips")]),
        ]
        aggregator = _aggregator(settings, adapters, clock)

        articles = await aggregator.get_news()

        assert [a.title for a in articles] == ["Nvidia unveils next generation AI chips"]
        assert aggregator.source_status["newsapi"]["status"] == "failed"
        assert aggregator.source_status["hackernews"]["status"] == "failed"
        assert aggregator.source_status["rss"] == {
            "status": "ok", "articles": 1, "error": None, "checked_at": clock.now.isoformat(),
        }

    async def test_slow_source_times_out(self, make_settings, clock, make_article, fake_adapter):
        settings = make_settings(SOURCE_TIMEOUT=0.05)
        adapters = [
            fake_adapter("gnews", [make_article("Slow source headline here")], delay=1.0, settings=settings),
            fake_adapter("rss", [make_article("Fast source headline here")], settings=settings),
        ]
        aggregator = _aggregator(settings, adapters, clock)

        articles = await aggregator.get_news()

        assert [a.title for a in articles] == ["Fast source headline here"]
        assert aggregator.source_status["gnews"]["error"] == "gnews: timed out after 0.05s"

    async def test_total_failure_without_cache_returns_sample(self, settings, clock, fake_adapter):
        adapters = [
            fake_adapter("newsapi", error=SourceUnavailable("newsapi", "API key not configured")),
            fake_adapter("rss", []),
        ]
        aggregator = _aggregator(settings, adapters, clock)

        articles = await aggregator.get_news()

        assert len(articles) == len(SAMPLE_ARTICLES_RAW)
        assert all(a.source_type == "sample" for a in articles)
        assert articles[0].id == "sample-1"
        assert aggregator.cache is None
        _assert_invariants(articles)

    async def test_total_failure_with_fresh_cache_serves_cache(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")])
        aggregator = _aggregator(settings, [adapter], clock)
        await aggregator.get_news()

        adapter.error = SourceUnavailable("newsapi", "HTTP 500")
        articles = await aggregator.get_news(force_refresh=True)

        assert [a.title for a in articles] == ["OpenAI launches new model for developers"]

    async def test_total_failure_with_expired_cache_returns_sample(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")])
        aggregator = _aggregator(settings, [adapter], clock)
        await aggregator.get_news()

        adapter.error = SourceUnavailable("newsapi", "HTTP 500")
        clock.advance(hours=1)
        articles = await aggregator.get_news()

        assert all(a.source_type == "sample" for a in articles)

    async def test_slow_feed_keeps_rss_results(self, make_settings, clock, sample_rss):
        settings = make_settings(SOURCE_TIMEOUT=0.3, FEED_TIMEOUT=0.1)
        feeds = {
            "fast": {"id": "fast", "name": "Fast Feed", "rss_url": "https://fast.example/feed"},
            "slow": {"id": "slow", "name": "Slow Feed", "rss_url": "https://slow.example/feed"},
        }

        async def handler(request):
            if request.url.host == "slow.example":
                await asyncio.sleep(1.0)
            return httpx.Response(200, text=sample_rss)

        rss = RSSFeedAdapter(settings, feeds=feeds, admit_probability=0.0, delay_seconds=0)
        aggregator = NewsAggregator(
            adapters=[rss], settings=settings, clock=clock, transport=httpx.MockTransport(handler),
        )

        articles = await aggregator.get_news()

        assert len(articles) == 3
        assert all(a.source_type == "rss" for a in articles)
        assert aggregator.source_status["rss"]["status"] == "ok"
        assert aggregator.source_status["rss"]["articles"] == 3

    async def test_processing_error_falls_back_to_sample(self, make_settings, clock, fake_adapter, make_article):
        class BrokenTranslator(Translator):
            async def translate(self, text):
                raise RuntimeError("translator crashed")

        settings = make_settings(TRANSLATION_ENABLED=True)
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")],
                               settings=settings)
        aggregator = _aggregator(settings, [adapter], clock, translator=BrokenTranslator(settings))

        fresh = await aggregator.get_news()
        cached = await aggregator.get_news()

        assert adapter.calls == 1
        assert all(a.source_type == "sample" for a in fresh)
        assert all(a.source_type == "sample" for a in cached)

    async def test_no_adapters_returns_sample(self, settings, clock):
        articles = await _aggregator(settings, [], clock).get_news()
        assert all(a.source_type == "sample" for a in articles)

    async def test_sample_dates_relative_to_now(self, settings, clock):
        articles = await _aggregator(settings, [], clock).get_news()
        assert articles[0].date == clock.now.date().isoformat()
        assert all(a.published_at <= clock.now for a in articles)


# =============================================================================
# PROCESSING
# =============================================================================

class TestProcessing:

    async def test_short_articles_dropped(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [
            make_article("Too short"),
            make_article("Long enough headline here", summary="tiny"),
            make_article("OpenAI launches new model for developers"),
        ])
        articles = await _aggregator(settings, [adapter], clock).get_news()

        assert [a.title for a in articles] == ["OpenAI launches new model for developers"]

    async def test_everything_dropped_returns_sample(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("Too short")])
        articles = await _aggregator(settings, [adapter], clock).get_news()

        assert all(a.source_type == "sample" for a in articles)

    async def test_duplicates_across_sources_removed(self, settings, clock, fake_adapter, make_article):
        adapters = [
            fake_adapter("newsapi", [make_article("Google DeepMind unveils Gemini 2")]),
            fake_adapter("gnews", [make_article("Google DeepMind Unveils Gemini 2")]),
        ]
        articles = await _aggregator(settings, adapters, clock).get_news()

        assert len(articles) == 1
        assert articles[0].category == "google-ai"

    async def test_classification_applied(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("rss", [
            make_article("OpenAI launches new model", summary="A new GPT model was released today."),
            make_article("Boston Dynamics shows off humanoid", summary="The robot can now sort packages."),
        ])
        articles = await _aggregator(settings, [adapter], clock).get_news()

        assert [a.category for a in articles] == ["openai", "robotics"]


# =============================================================================
# TRANSLATION
# =============================================================================

class TestTranslation:

    async def test_translated_fields_keep_originals(self, make_settings, clock, make_article, fake_adapter):
        settings = make_settings(TRANSLATION_ENABLED=True)
        adapter = fake_adapter("newsapi", [make_article(
            "OpenAI launches new model for developers",
            summary="The company released a powerful model for researchers.",
        )], settings=settings)
        aggregator = _aggregator(settings, [adapter], clock, translator=Translator(settings))

        article = (await aggregator.get_news())[0]

        assert article.title == "OpenAI 发布 新 模型 for developers"
        assert article.original_title == "OpenAI launches new model for developers"
        assert article.original_summary == "The company released a powerful model for researchers."
        assert "强大的" in article.summary

    async def test_cache_hits_reuse_memoized_translations(self, make_settings, clock, make_article, fake_adapter):
        settings = make_settings(TRANSLATION_ENABLED=True)
        translator = Translator(settings)
        adapter = fake_adapter("newsapi", [make_article(
            "OpenAI launches new model for developers",
            summary="The company released a powerful model for researchers.",
        )], settings=settings)
        aggregator = _aggregator(settings, [adapter], clock, translator=translator)

        await aggregator.get_news()
        computed = translator.table_calls
        again = await aggregator.get_news()

        assert adapter.calls == 1
        assert translator.table_calls == computed
        assert again[0].title == "OpenAI 发布 新 模型 for developers"

    async def test_sample_is_never_translated(self, make_settings, clock):
        settings = make_settings(TRANSLATION_ENABLED=True)
        translator = Translator(settings)
        articles = await _aggregator(settings, [], clock, translator=translator).get_news()

        assert [a.title for a in articles] == [raw[0] for raw in SAMPLE_ARTICLES_RAW]
        assert translator.table_calls == 0

    async def test_translation_disabled_by_default(self, settings, clock, fake_adapter, make_article):
        adapter = fake_adapter("newsapi", [make_article("OpenAI launches new model for developers")])
        article = (await _aggregator(settings, [adapter], clock).get_news())[0]

        assert article.title == "OpenAI launches new model for developers"
        assert article.original_title is None
