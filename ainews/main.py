"""
AI News Aggregator - Main Entry Point.
FastAPI server and CLI interface.
"""

import argparse
import asyncio
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .aggregator import NewsAggregator
from .api import health, news
from .config import get_settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared aggregator once per process."""
    settings = get_settings()
    app.state.aggregator = NewsAggregator(settings=settings)
    logger.info(
        f"Starting AI News Aggregator (sources: {', '.join(settings.get_enabled_sources()) or 'none'}, "
        f"cache TTL {settings.cache_ttl_minutes}m)"
    )
    if settings.translation_enabled:
        logger.info(f"Translation enabled -> {settings.translate_target_lang}")
    yield
    logger.info("Shutting down AI News Aggregator")


app = FastAPI(
    title="AI News Aggregator",
    description="AI and technology headlines from news APIs, RSS feeds and Hacker News",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(news.router)


# CLI Runner
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI News Aggregator")
    parser.add_argument(
        "--server",
        action="store_true",
        help="Start the FastAPI server"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Server port (default: 8000)"
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore the cache and fetch every source"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print articles as JSON instead of a headline list"
    )
    return parser


async def cli_main(args: argparse.Namespace):
    """Fetch once and print the result."""
    aggregator = NewsAggregator()
    articles = await aggregator.get_news(force_refresh=args.refresh)

    if args.json:
        payload = [a.model_dump(mode="json", by_alias=True) for a in articles]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    print("\n" + "=" * 60)
    print("AI NEWS")
    print("=" * 60)
    for article in articles:
        print(f"[{article.category}] {article.title}")
        print(f"    {article.source} | {article.date} | {article.url}")
    print("=" * 60)

    failed = [sid for sid, status in aggregator.source_status.items() if status["status"] != "ok"]
    print(f"Articles: {len(articles)}")
    if failed:
        print(f"Unavailable sources: {', '.join(failed)}")
    print("=" * 60 + "\n")


def main():
    """Entry point for CLI."""
    args = build_parser().parse_args()

    if args.server:
        import uvicorn
        logger.info(f"Starting server on port {args.port}...")
        uvicorn.run(app, host="0.0.0.0", port=args.port)
        return

    asyncio.run(cli_main(args))


if __name__ == "__main__":
    main()
