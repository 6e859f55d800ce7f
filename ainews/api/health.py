"""Health check router -- cache state, per-source status, config summary."""

from datetime import datetime, timezone

from fastapi import APIRouter

from ainews import __version__
from ainews.api.dependencies import Aggregator

router = APIRouter()


@router.get("/")
async def root():
    return {"service": "AI News Aggregator API", "version": __version__}


@router.get("/health")
async def health(aggregator: Aggregator):
    settings = aggregator.settings
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "cache_valid": aggregator.is_cache_valid(),
        "sources": aggregator.source_status,
        "config": {
            "enabled_sources": settings.get_enabled_sources(),
            "cache_ttl_minutes": settings.cache_ttl_minutes,
            # Timeouts
            "request_timeout": settings.request_timeout,
            "source_timeout": settings.source_timeout,
            # Translation
            "translation_enabled": settings.translation_enabled,
            "translate_target_lang": settings.translate_target_lang if settings.translation_enabled else None,
        },
    }
