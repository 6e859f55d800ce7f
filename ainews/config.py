"""
Configuration management for the AI News Aggregator.
Settings come from environment variables (or a .env file); static source
tables and keyword lists live beside them.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


# Placeholder values shipped in .env templates. A key equal to its placeholder
# counts as "not configured" and the adapter is skipped.
NEWSAPI_KEY_PLACEHOLDER = "YOUR_NEWSAPI_KEY"
GNEWS_KEY_PLACEHOLDER = "YOUR_GNEWS_API_KEY"
TRANSLATE_KEY_PLACEHOLDER = "YOUR_TRANSLATE_API_KEY"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Keyed REST providers ──
    newsapi_key: str = Field(default=NEWSAPI_KEY_PLACEHOLDER, alias="NEWSAPI_KEY")
    gnews_api_key: str = Field(default=GNEWS_KEY_PLACEHOLDER, alias="GNEWS_API_KEY")
    # Page size per provider request (providers cap free tiers around 20-30)
    page_size: int = Field(default=20, alias="NEWS_PAGE_SIZE")

    # Comma-separated adapter ids: newsapi, gnews, rss, hackernews
    enabled_sources: str = Field(default="newsapi,gnews,rss,hackernews", alias="ENABLED_SOURCES")

    # ── Cache ──
    cache_ttl_minutes: int = Field(default=30, alias="CACHE_TTL_MINUTES")

    # ── Network ──
    # Per-request timeout (httpx) and overall per-adapter timeout (asyncio.wait_for)
    request_timeout: float = Field(default=10.0, alias="REQUEST_TIMEOUT")
    source_timeout: float = Field(default=30.0, alias="SOURCE_TIMEOUT")
    user_agent: str = Field(
        default="AINewsAggregator/1.0 (+https://github.com/ainews/ai-news-aggregator)",
        alias="USER_AGENT",
    )

    # ── RSS feeds ──
    # Pause between sequential feed requests, keeps upstream rate limits happy
    feed_delay_seconds: float = Field(default=0.2, alias="FEED_DELAY_SECONDS")
    # Per-feed budget; a hanging feed is cut off without touching its siblings
    feed_timeout: float = Field(default=10.0, alias="FEED_TIMEOUT")
    feed_max_items: int = Field(default=20, alias="FEED_MAX_ITEMS")
    # Chance of admitting a feed item with no AI keyword (general-tech diversity)
    feed_admit_probability: float = Field(default=0.3, alias="FEED_ADMIT_PROBABILITY")

    # ── Hacker News ──
    hn_top_n: int = Field(default=30, alias="HN_TOP_N")

    # ── Translation (optional) ──
    translation_enabled: bool = Field(default=False, alias="TRANSLATION_ENABLED")
    translate_api_key: str = Field(default=TRANSLATE_KEY_PLACEHOLDER, alias="TRANSLATE_API_KEY")
    translate_api_url: str = Field(
        default="https://translate.googleapis.com/translate_a/single",
        alias="TRANSLATE_API_URL",
    )
    translate_target_lang: str = Field(default="zh-CN", alias="TRANSLATE_TARGET_LANG")

    # Application Settings
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True

    def get_enabled_sources(self) -> List[str]:
        """Parse ENABLED_SOURCES into a list of adapter ids."""
        return [s.strip().lower() for s in self.enabled_sources.split(",") if s.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def is_key_configured(key: str, placeholder: str) -> bool:
    """True when a credential is present and not the shipped placeholder."""
    key = (key or "").strip()
    return bool(key) and key != placeholder


# ══════════════════════════════════════════════════════════════════════════════
# KEYWORDS
# ══════════════════════════════════════════════════════════════════════════════

# Brand/platform terms OR-ed into the REST provider query next to
# "artificial intelligence"
AI_PLATFORM_KEYWORDS = [
    "machine learning",
    "deep learning",
    "ChatGPT",
    "OpenAI",
    "Claude",
    "Anthropic",
    "Gemini",
    "DeepMind",
    "Copilot",
    "Llama",
    "Midjourney",
    "Stable Diffusion",
    "DeepSeek",
    "large language model",
]

# Relevance filter for feed items and forum stories (matched case-insensitively
# on word boundaries)
AI_KEYWORDS = [
    "ai",
    "artificial intelligence",
    "machine learning",
    "deep learning",
    "neural",
    "llm",
    "llms",
    "gpt",
    "chatgpt",
    "openai",
    "anthropic",
    "claude",
    "gemini",
    "deepmind",
    "copilot",
    "llama",
    "mistral",
    "deepseek",
    "transformer",
    "diffusion",
    "generative",
    "chatbot",
    "robot",
    "robotics",
    "computer vision",
    "language model",
    "nvidia",
]

# Canonical display names for publishers (unknown names pass through)
SOURCE_ALIASES = {
    "TechCrunch": "TechCrunch",
    "The Verge": "The Verge",
    "Wired": "Wired",
    "WIRED": "Wired",
    "MIT Technology Review": "MIT Technology Review",
    "OpenAI Blog": "OpenAI",
    "Google AI Blog": "Google AI",
    "Google DeepMind Blog": "DeepMind",
    "DeepMind Blog": "DeepMind",
    "Ars Technica": "Ars Technica",
    "VentureBeat AI": "VentureBeat",
    "Hacker News": "Hacker News",
}


# ══════════════════════════════════════════════════════════════════════════════
# NEWS SOURCES - RSS feeds and API endpoints
# ══════════════════════════════════════════════════════════════════════════════

FEED_SOURCES = {
    "techcrunch_ai": {
        "id": "techcrunch_ai",
        "name": "TechCrunch",
        "rss_url": "https://techcrunch.com/category/artificial-intelligence/feed/",
    },
    "verge_ai": {
        "id": "verge_ai",
        "name": "The Verge",
        "rss_url": "https://www.theverge.com/rss/ai-artificial-intelligence/index.xml",
    },
    "mit_tech_review": {
        "id": "mit_tech_review",
        "name": "MIT Technology Review",
        "rss_url": "https://www.technologyreview.com/topic/artificial-intelligence/feed",
    },
    "venturebeat_ai": {
        "id": "venturebeat_ai",
        "name": "VentureBeat AI",
        "rss_url": "https://venturebeat.com/category/ai/feed/",
    },
    "wired_ai": {
        "id": "wired_ai",
        "name": "Wired",
        "rss_url": "https://www.wired.com/feed/tag/ai/latest/rss",
    },
    "ars_technica": {
        "id": "ars_technica",
        "name": "Ars Technica",
        "rss_url": "https://feeds.arstechnica.com/arstechnica/technology-lab",
    },
}

NEWSAPI_URL = "https://newsapi.org/v2/everything"
GNEWS_URL = "https://gnews.io/api/v4/search"
HN_TOP_STORIES_URL = "https://hacker-news.firebaseio.com/v0/topstories.json"
HN_ITEM_URL = "https://hacker-news.firebaseio.com/v0/item/{id}.json"
HN_DISCUSSION_URL = "https://news.ycombinator.com/item?id={id}"
