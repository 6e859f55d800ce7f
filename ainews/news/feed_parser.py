"""
Minimal RSS/Atom text scanner.

No XML parser: every field is pulled out of the raw markup with regexes, so
broken feeds (unescaped ampersands, truncated bodies, stray HTML) still
yield whatever items are recognizable.

ALIGNMENT:
  Titles drive the item list. The first two <title> occurrences belong to
  the channel (feed title, feed image title) and are skipped. Descriptions,
  links and dates are aligned to items from the tail of their lists, so any
  leading channel-level occurrences fall away. Images are matched by raw
  position (images[i] for item i); when a feed mixes items with and without
  media the image can land on the wrong item.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

# Channel title + channel image title
HEADER_TITLE_COUNT = 2
MIN_TITLE_LENGTH = 6
DEFAULT_MAX_ITEMS = 20

_FLAGS = re.IGNORECASE | re.DOTALL

_TITLE_RE = re.compile(r"<title\b[^>]*>(.*?)</title>", _FLAGS)
_LINK_RE = re.compile(
    r"<link\b[^>]*?href=[\"']([^\"']+)[\"'][^>]*/?>|<link\b[^>]*>(.*?)</link>", _FLAGS
)

# Equivalent tags in preference order; the first tag present in the body is
# used for every item so RSS items carrying both <description> and
# <content:encoded> are not counted twice.
_DESCRIPTION_TAGS = ("description", "summary", "content:encoded", "content")
_DATE_TAGS = ("pubDate", "published", "updated", "dc:date")
_IMAGE_RE = re.compile(
    r"<media:(?:content|thumbnail)\b[^>]*?url=[\"']([^\"']+)[\"']"
    r"|<enclosure\b[^>]*?url=[\"']([^\"']+\.(?:jpe?g|png|gif|webp)[^\"']*)[\"']",
    _FLAGS,
)

_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")

# Order matters: &amp; last so "&amp;lt;" stays a literal "&lt;"
_ENTITIES = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
]


@dataclass
class FeedItem:
    """One item scanned out of a feed body."""
    title: str
    description: str = ""
    link: str = ""
    pub_date: str = ""
    image_url: Optional[str] = None


def strip_markup(text: str) -> str:
    """Unwrap CDATA, decode the basic entities, drop tags, collapse whitespace."""
    if not text:
        return ""
    text = _CDATA_RE.sub(r"\1", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = _TAG_RE.sub(" ", text)
    return _WS_RE.sub(" ", text).strip()


def _first_present(text: str, tags) -> List[str]:
    for tag in tags:
        pattern = re.compile(rf"<{re.escape(tag)}(?:\s[^>]*)?>(.*?)</{re.escape(tag)}>", _FLAGS)
        values = [m.group(1) for m in pattern.finditer(text)]
        if values:
            return values
    return []


def _tail_aligned(values: List[str], count: int) -> List[str]:
    """Keep the last `count` values; leading extras are channel-level."""
    if len(values) > count:
        return values[len(values) - count:]
    return values


def parse_feed(text: str, max_items: int = DEFAULT_MAX_ITEMS) -> List[FeedItem]:
    """Scan a raw feed body into at most `max_items` FeedItems."""
    if not text:
        return []

    titles = [m.group(1) for m in _TITLE_RE.finditer(text)][HEADER_TITLE_COUNT:]
    if not titles:
        return []
    count = len(titles)

    descriptions = _tail_aligned(_first_present(text, _DESCRIPTION_TAGS), count)
    links = _tail_aligned(
        [(m.group(1) or m.group(2) or "") for m in _LINK_RE.finditer(text)], count
    )
    dates = _tail_aligned(_first_present(text, _DATE_TAGS), count)
    images = [(m.group(1) or m.group(2)) for m in _IMAGE_RE.finditer(text)]

    items: List[FeedItem] = []
    for i, raw_title in enumerate(titles):
        title = strip_markup(raw_title)
        if len(title) < MIN_TITLE_LENGTH:
            continue

        items.append(FeedItem(
            title=title,
            description=strip_markup(descriptions[i]) if i < len(descriptions) else "",
            link=strip_markup(links[i]) if i < len(links) else "",
            pub_date=strip_markup(dates[i]) if i < len(dates) else "",
            image_url=images[i] if i < len(images) else None,
        ))
        if len(items) >= max_items:
            break

    logger.debug(f"Feed parser: {len(items)} items from {count} item titles")
    return items
