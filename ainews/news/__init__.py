"""
News text processing.

Modules:
- feed_parser: regex RSS/Atom scanner
- classifier: ordered keyword topic classifier
- normalizer: title/summary/source cleanup + title dedup
- sample_articles: static last-resort article set
"""

from ainews.news.feed_parser import FeedItem, parse_feed, strip_markup
from ainews.news.classifier import classify, CATEGORY_RULES
from ainews.news.normalizer import (
    clean_title,
    clean_summary,
    clean_source,
    deduplicate,
    normalize_article,
    passes_length_floor,
)
from ainews.news.sample_articles import get_sample_articles
