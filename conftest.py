"""
Pytest Configuration and Fixtures

Provides shared fixtures and configuration for all tests.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from ainews.config import Settings
from ainews.schemas.news import Article
from ainews.tools.news_sources import SourceAdapter


# =============================================================================
# HELPERS
# =============================================================================

class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakeAdapter(SourceAdapter):
    """In-memory adapter: returns canned articles or raises a canned error."""

    def __init__(self, source_id, articles=None, error=None, delay=0.0, settings=None):
        super().__init__(settings)
        self._source_id = source_id
        self.articles = list(articles or [])
        self.error = error
        self.delay = delay
        self.calls = 0

    @property
    def source_id(self):
        return self._source_id

    async def fetch(self, client):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.articles)


def build_settings(**overrides):
    values = {
        "NEWSAPI_KEY": "test-newsapi-key",
        "GNEWS_API_KEY": "test-gnews-key",
        "ENABLED_SOURCES": "newsapi,gnews,rss,hackernews",
        "CACHE_TTL_MINUTES": 30,
        "SOURCE_TIMEOUT": 5.0,
        "FEED_DELAY_SECONDS": 0,
        "TRANSLATION_ENABLED": False,
        "TRANSLATE_API_KEY": "YOUR_TRANSLATE_API_KEY",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings():
    """Settings isolated from the developer's .env file"""
    return build_settings()


@pytest.fixture
def make_settings():
    return build_settings


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_article():
    """Factory for raw articles as an adapter would emit them"""
    counter = {"n": 0}

    def _make(title, summary="A detailed summary describing what happened in the story.", **kwargs):
        counter["n"] += 1
        kwargs.setdefault("id", f"test-{counter['n']}")
        kwargs.setdefault("source", "TechCrunch")
        kwargs.setdefault("url", f"https://example.com/{counter['n']}")
        return Article(title=title, summary=summary, **kwargs)

    return _make


@pytest.fixture
def fake_adapter(settings):
    """Factory for FakeAdapter, bound to the test settings unless overridden"""
    default_settings = settings

    def _make(source_id, articles=None, error=None, delay=0.0, settings=None):
        return FakeAdapter(
            source_id, articles=articles, error=error, delay=delay, settings=settings or default_settings
        )

    return _make


@pytest.fixture
def sample_rss():
    """RSS 2.0 body: channel title, channel image title, three items"""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
<channel>
  <title>AI News Daily</title>
  <link>https://feed.example.com</link>
  <description>Channel level description</description>
  <image>
    <title>AI News Daily logo</title>
    <url>https://feed.example.com/logo.png</url>
  </image>
  <item>
    <title>OpenAI ships a faster reasoning model</title>
    <link>https://feed.example.com/openai-reasoning</link>
    <description><![CDATA[<p>OpenAI released a model that reasons &amp; plans faster.</p>]]></description>
    <pubDate>Wed, 15 Jan 2025 10:00:00 GMT</pubDate>
    <media:content url="https://feed.example.com/img1.jpg" medium="image"/>
  </item>
  <item>
    <title>Anthropic expands Claude to new regions</title>
    <link>https://feed.example.com/claude-regions</link>
    <description>Claude is now available to developers in more countries.</description>
    <pubDate>Tue, 14 Jan 2025 09:30:00 GMT</pubDate>
    <media:content url="https://feed.example.com/img2.jpg" medium="image"/>
  </item>
  <item>
    <title>Nvidia details its next AI chip</title>
    <link>https://feed.example.com/nvidia-chip</link>
    <description>The new GPU targets large-scale model training in data centers.</description>
    <pubDate>Mon, 13 Jan 2025 08:00:00 GMT</pubDate>
    <media:content url="https://feed.example.com/img3.jpg" medium="image"/>
  </item>
</channel>
</rss>"""
