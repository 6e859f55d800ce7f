"""
Common enums used across the application.

Category is the closed topic vocabulary every Article is tagged with.
"""

from enum import Enum


class Category(str, Enum):
    """Topic categories (fixed, closed set)."""
    OPENAI = "openai"
    GOOGLE_AI = "google-ai"
    CLAUDE = "claude"
    CHINESE_AI = "chinese-ai"
    MICROSOFT_AI = "microsoft-ai"
    META_AI = "meta-ai"
    IMAGE_TOOLS = "image-tools"
    VIDEO_TOOLS = "video-tools"
    ROBOTICS = "robotics"
    COMPUTER_VISION = "computer-vision"
    NLP = "nlp"
    AI_TOOLS = "ai-tools"
    DEEP_LEARNING = "deep-learning"
    AI_SAFETY = "ai-safety"
    AI_HARDWARE = "ai-hardware"
    MACHINE_LEARNING = "machine-learning"


DEFAULT_CATEGORY = Category.MACHINE_LEARNING


class SourceType(str, Enum):
    """Upstream source families."""
    API = "api"
    RSS = "rss"
    FORUM = "forum"
    SAMPLE = "sample"
