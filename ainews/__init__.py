"""AI News Aggregator: multi-source AI/tech headlines with caching and fallbacks."""

__version__ = "1.0.0"
