"""
Error taxonomy for the aggregation pipeline.

Every error here is recovered inside the package:
  - SourceUnavailable: one adapter failed (missing key, HTTP error, transport error)
  - ParseFailure: one malformed record inside a payload, skipped by the adapter
  - TotalAggregationFailure: no adapter produced anything, triggers the fallback chain
  - TranslationFailure: translation API failed, term table takes over
"""


class NewsAggregatorError(Exception):
    """Base class for all aggregator errors."""


class SourceUnavailable(NewsAggregatorError):
    """A single source could not deliver articles."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class ParseFailure(NewsAggregatorError):
    """A single record inside a source payload is malformed."""


class TotalAggregationFailure(NewsAggregatorError):
    """Every source failed or returned zero usable articles."""


class TranslationFailure(NewsAggregatorError):
    """The translation API call failed or returned an unexpected shape."""
