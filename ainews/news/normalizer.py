"""
Text cleanup for article fields.

clean_title / clean_summary / clean_source are independent pure functions.
The length floors (title > 10, summary > 20) are enforced by the pipeline
through passes_length_floor, not by the cleaners themselves.
"""

import hashlib
import logging
import re
from typing import List, Optional

from ainews.config import SOURCE_ALIASES
from ainews.news.classifier import classify
from ainews.schemas.news import Article

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 10
MIN_SUMMARY_LENGTH = 20
MAX_SUMMARY_LENGTH = 200
UNKNOWN_SOURCE = "Unknown"

_TITLE_PREFIX_RE = re.compile(r"^\s*(?:BREAKING|UPDATE)\s*:\s*", re.IGNORECASE)
# A bare "More" only counts when it is the whole link label ("More...", "More »"),
# so sentences such as "More than 100 labs..." survive.
_BOILERPLATE_LINE_RE = re.compile(
    r"^\s*(?:Read more\b|Full story\b|More\s*(?:\.\.\.|…|»|>>|:|$)).*$",
    re.IGNORECASE | re.MULTILINE,
)
_WS_RE = re.compile(r"\s+")


def clean_title(title: Optional[str]) -> str:
    """Strip BREAKING:/UPDATE: prefixes and surrounding whitespace."""
    if not title:
        return ""
    cleaned = title
    while True:
        stripped = _TITLE_PREFIX_RE.sub("", cleaned, count=1)
        if stripped == cleaned:
            break
        cleaned = stripped
    return cleaned.strip()


def clean_summary(summary: Optional[str]) -> str:
    """Drop "Read more..." style lines, collapse whitespace, cap at 200 chars."""
    if not summary:
        return ""
    cleaned = _BOILERPLATE_LINE_RE.sub("", summary)
    cleaned = _WS_RE.sub(" ", cleaned).strip()
    if len(cleaned) > MAX_SUMMARY_LENGTH:
        cleaned = cleaned[:MAX_SUMMARY_LENGTH - 3] + "..."
    return cleaned


def clean_source(source: Optional[str]) -> str:
    """Map publisher names to their canonical display form."""
    if not source or not source.strip():
        return UNKNOWN_SOURCE
    source = source.strip()
    return SOURCE_ALIASES.get(source, source)


def passes_length_floor(title: str, summary: str) -> bool:
    return len(title or "") > MIN_TITLE_LENGTH and len(summary or "") > MIN_SUMMARY_LENGTH


def normalize_article(article: Article) -> Article:
    """Return a cleaned + classified copy of `article`."""
    title = clean_title(article.title)
    summary = clean_summary(article.summary)
    return article.model_copy(update={
        "title": title,
        "summary": summary,
        "source": clean_source(article.source),
        "category": classify(f"{title} {summary}").value,
    })


def deduplicate(articles: List[Article]) -> List[Article]:
    """Remove duplicate articles based on normalized title."""
    seen_hashes = set()
    unique = []

    for article in articles:
        title_norm = article.title.lower().strip()[:60]
        content_hash = hashlib.md5(title_norm.encode()).hexdigest()

        if content_hash not in seen_hashes:
            seen_hashes.add(content_hash)
            unique.append(article)

    if len(unique) != len(articles):
        logger.info(f"Deduplication: {len(articles)} -> {len(unique)} articles")
    return unique
