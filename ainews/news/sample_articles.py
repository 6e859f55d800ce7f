"""
Static sample articles, the last-resort result when every live source fails
and no fresh cache exists.

Kept in a separate file so the aggregator stays readable. Dates are
computed relative to the call time so the set always looks recent.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ainews.schemas.base import Category, SourceType
from ainews.schemas.news import Article

# (title, summary, source, url, category, days_ago)
SAMPLE_ARTICLES_RAW = [
    (
        "OpenAI Announces GPT-5 with Revolutionary Capabilities",
        "OpenAI has unveiled GPT-5, featuring stronger reasoning and multimodal understanding. "
        "The new model shows significant gains in complex problem-solving and creative tasks.",
        "OpenAI", "https://openai.com/blog/gpt-5", Category.OPENAI, 0,
    ),
    (
        "Google's Gemini Pro: Next-Generation AI Assistant",
        "Google introduces Gemini Pro, an AI system that integrates across Google services, "
        "offering enhanced productivity and creative assistance for users worldwide.",
        "Google AI", "https://ai.googleblog.com/gemini-pro", Category.GOOGLE_AI, 1,
    ),
    (
        "Anthropic Expands Claude with Longer Context and Tool Use",
        "Anthropic released a Claude update that handles much longer documents and can call "
        "external tools, aimed at enterprise teams automating research and coding work.",
        "Anthropic", "https://www.anthropic.com/news", Category.CLAUDE, 1,
    ),
    (
        "MIT Researchers Develop AI for Cancer Drug Discovery",
        "MIT scientists built a system that identified promising new compounds for cancer "
        "treatment, showing strong results in early trials and speeding up drug discovery.",
        "MIT Technology Review", "https://www.technologyreview.com/ai-cancer-discovery",
        Category.MACHINE_LEARNING, 2,
    ),
    (
        "Boston Dynamics' New Robot Learns Tasks by Demonstration",
        "Boston Dynamics unveiled a humanoid robot that learns complex tasks from demonstration "
        "and adapts to new environments in real time, a notable step for robotics.",
        "Boston Dynamics", "https://bostondynamics.com/new-robot", Category.ROBOTICS, 3,
    ),
    (
        "Meta's AI Translation System Breaks Language Barriers",
        "Meta launched a translation system covering more than 200 languages with near-human "
        "accuracy, enabling communication across cultures and languages.",
        "Meta AI", "https://ai.meta.com/translation-breakthrough", Category.META_AI, 4,
    ),
    (
        "NVIDIA Unveils Next-Generation GPUs for AI Training",
        "NVIDIA introduced a new GPU architecture built for large-scale model training, "
        "promising faster throughput and lower energy use for data center operators.",
        "NVIDIA", "https://nvidianews.nvidia.com", Category.AI_HARDWARE, 5,
    ),
]


def get_sample_articles(now: Optional[datetime] = None) -> List[Article]:
    """Return fresh Article copies of the sample set."""
    now = now or datetime.now(timezone.utc)
    articles = []
    for index, (title, summary, source, url, category, days_ago) in enumerate(SAMPLE_ARTICLES_RAW, start=1):
        published = now - timedelta(days=days_ago)
        articles.append(Article(
            id=f"sample-{index}",
            title=title,
            summary=summary,
            source=source,
            url=url,
            category=category,
            source_type=SourceType.SAMPLE,
            published_at=published,
        ))
    return articles
