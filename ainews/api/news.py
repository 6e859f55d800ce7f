"""News router -- processed articles and cache control."""

from typing import Optional

from fastapi import APIRouter, Query

from ainews.api.dependencies import Aggregator
from ainews.schemas.base import Category

router = APIRouter(prefix="/news")


@router.get("")
async def get_news(
    aggregator: Aggregator,
    refresh: bool = Query(False, description="Bypass the cache and fetch live sources"),
    category: Optional[Category] = Query(None, description="Only return this topic"),
):
    articles = await aggregator.get_news(force_refresh=refresh)
    if category is not None:
        articles = [a for a in articles if a.category == category.value]

    return {
        "count": len(articles),
        "cached": aggregator.is_cache_valid(),
        "articles": [a.model_dump(mode="json", by_alias=True) for a in articles],
    }


@router.get("/cache")
async def cache_info(aggregator: Aggregator):
    entry = aggregator.cache
    return {
        "valid": aggregator.is_cache_valid(),
        "timestamp": entry.timestamp.isoformat() if entry else None,
        "count": len(entry.data) if entry else 0,
    }


@router.delete("/cache")
async def clear_cache(aggregator: Aggregator):
    aggregator.clear_cache()
    return {"status": "cleared"}
