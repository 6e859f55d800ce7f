"""FastAPI dependency injection -- Depends() patterns using app.state from lifespan."""

from typing import Annotated

from fastapi import Depends, Request

from ainews.aggregator import NewsAggregator


def get_aggregator(request: Request) -> NewsAggregator:
    return request.app.state.aggregator


# Type alias for cleaner route signatures
Aggregator = Annotated[NewsAggregator, Depends(get_aggregator)]
