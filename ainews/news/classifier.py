"""
Keyword topic classifier.

CATEGORY_RULES is evaluated top to bottom and the first group with a hit
wins, so brand-specific groups sit above generic ones ("GPT" beats
"deep learning"). Anything without a hit is machine-learning.
"""

import re
from typing import List, Tuple

from ainews.schemas.base import Category, DEFAULT_CATEGORY

# (keywords, category), in priority order. Keywords match case-insensitively
# as whole words, with an optional plural "s"/"es".
CATEGORY_RULES: List[Tuple[Tuple[str, ...], Category]] = [
    (("openai", "chatgpt", "gpt", "gpt-4", "gpt-5", "gpt4", "gpt5", "gpt-4o", "sam altman", "dall-e", "sora"),
     Category.OPENAI),
    (("gemini", "deepmind", "google ai", "alphafold", "google"),
     Category.GOOGLE_AI),
    (("claude", "anthropic"),
     Category.CLAUDE),
    (("deepseek", "qwen", "baidu", "ernie bot", "alibaba", "tencent", "bytedance", "moonshot",
      "kimi", "zhipu", "chinese ai", "china's ai"),
     Category.CHINESE_AI),
    (("microsoft", "copilot", "azure ai", "bing chat"),
     Category.MICROSOFT_AI),
    (("llama", "meta ai", "meta's", "facebook ai", "zuckerberg"),
     Category.META_AI),
    (("midjourney", "stable diffusion", "text-to-image", "image generation", "image generator", "firefly"),
     Category.IMAGE_TOOLS),
    (("text-to-video", "video generation", "video generator", "runway", "pika", "ai video"),
     Category.VIDEO_TOOLS),
    (("robot", "robotics", "humanoid", "boston dynamics", "autonomous vehicle", "self-driving"),
     Category.ROBOTICS),
    (("computer vision", "image recognition", "object detection", "facial recognition", "visual"),
     Category.COMPUTER_VISION),
    (("natural language", "nlp", "language model", "llm", "chatbot", "translation", "speech"),
     Category.NLP),
    (("ai tool", "ai assistant", "ai agent", "plugin", "productivity", "automation"),
     Category.AI_TOOLS),
    (("deep learning", "neural network", "transformer", "reinforcement learning"),
     Category.DEEP_LEARNING),
    (("ai safety", "alignment", "regulation", "ethics", "ai act", "bias", "misinformation", "deepfake"),
     Category.AI_SAFETY),
    (("nvidia", "gpu", "chip", "chipmaker", "tpu", "semiconductor", "data center", "datacenter"),
     Category.AI_HARDWARE),
]


def _rule_pattern(keywords) -> re.Pattern:
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})(?:s|es)?\b", re.IGNORECASE)


_COMPILED_RULES = [(_rule_pattern(keywords), category) for keywords, category in CATEGORY_RULES]


def classify(text: str) -> Category:
    """Map free text to exactly one Category."""
    text = text or ""
    for pattern, category in _COMPILED_RULES:
        if pattern.search(text):
            return category
    return DEFAULT_CATEGORY
