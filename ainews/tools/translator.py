"""
Best-effort translation with a memoized cache.

translate() never raises. Order of attempts:
  1. cache hit on the first 100 characters of the input
  2. translation API, when TRANSLATE_API_KEY is configured
  3. TERM_TABLE substitution (platform names, AI vocabulary, common verbs/adjectives)
  4. the input unchanged

Every result is cached, including input that came back unchanged, so one
text costs at most one API or table computation. The cache is per
Translator instance, unbounded and never evicted.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ainews.config import TRANSLATE_KEY_PLACEHOLDER, Settings, get_settings, is_key_configured
from ainews.errors import TranslationFailure

logger = logging.getLogger(__name__)

CACHE_KEY_LENGTH = 100
SUMMARY_TRIGGER_LENGTH = 150
MIN_SENTENCE_LENGTH = 20
TRUNCATE_AT = 147

# English → Simplified Chinese, applied top to bottom. Multi-word terms first
# so "machine learning" is not split by the single-word entries.
TERM_TABLE: List[Tuple[str, str]] = [
    # AI terminology
    ("natural language processing", "自然语言处理"),
    ("artificial intelligence", "人工智能"),
    ("large language models", "大语言模型"),
    ("large language model", "大语言模型"),
    ("generative AI", "生成式人工智能"),
    ("machine learning", "机器学习"),
    ("deep learning", "深度学习"),
    ("neural networks", "神经网络"),
    ("neural network", "神经网络"),
    ("computer vision", "计算机视觉"),
    ("open-source", "开源"),
    ("open source", "开源"),
    ("chatbots", "聊天机器人"),
    ("chatbot", "聊天机器人"),
    ("robotics", "机器人技术"),
    ("robots", "机器人"),
    ("robot", "机器人"),
    ("models", "模型"),
    ("model", "模型"),
    ("algorithm", "算法"),
    ("dataset", "数据集"),
    ("training", "训练"),
    ("researchers", "研究人员"),
    ("research", "研究"),
    ("startup", "初创公司"),
    # Platform names
    ("Google", "谷歌"),
    ("Microsoft", "微软"),
    ("Amazon", "亚马逊"),
    ("Apple", "苹果"),
    ("NVIDIA", "英伟达"),
    ("Baidu", "百度"),
    ("Alibaba", "阿里巴巴"),
    ("Tencent", "腾讯"),
    ("ByteDance", "字节跳动"),
    # Verbs
    ("launches", "发布"),
    ("launched", "发布了"),
    ("announces", "宣布"),
    ("announced", "宣布了"),
    ("releases", "发布"),
    ("released", "发布了"),
    ("unveils", "推出"),
    ("unveiled", "推出了"),
    ("introduces", "推出"),
    # Adjectives
    ("latest", "最新"),
    ("powerful", "强大的"),
    ("new", "新"),
]

# Phrases worth surfacing next to a one-sentence summary
KEY_TERMS = [
    "人工智能", "大语言模型", "生成式人工智能", "机器学习", "深度学习", "开源",
    "OpenAI", "GPT", "Claude", "Gemini", "Llama", "DeepSeek",
]

_COMPILED_TABLE = [
    (re.compile(r"\b" + re.escape(term) + r"\b", re.IGNORECASE), replacement)
    for term, replacement in TERM_TABLE
]
_SENTENCE_END_RE = re.compile(r"(?<=[.!?。！？])\s*")


def _first_leaf(payload: Any) -> Any:
    """Descend payload[0][0]... until a non-list value."""
    while isinstance(payload, list):
        if not payload:
            return None
        payload = payload[0]
    return payload


class Translator:
    """
    Memoizing translator.

    Usage:
        translator = Translator()
        zh = await translator.translate("OpenAI launches new model")
        short = translator.summarize(zh)
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self.transport = transport
        self._cache: Dict[str, str] = {}
        # Instrumentation: upstream/table computations actually performed
        self.api_calls = 0
        self.table_calls = 0

    @property
    def has_api_key(self) -> bool:
        return is_key_configured(self.settings.translate_api_key, TRANSLATE_KEY_PLACEHOLDER)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self):
        self._cache.clear()

    async def translate(self, text: str) -> str:
        """Translate `text`; returns the input unchanged when nothing applies."""
        if not text or not text.strip():
            return text

        key = text[:CACHE_KEY_LENGTH]
        if key in self._cache:
            return self._cache[key]

        result: Optional[str] = None
        if self.has_api_key:
            try:
                result = await self._translate_api(text)
            except TranslationFailure as e:
                logger.warning(f"Translation API failed, using term table: {e}")

        if result is None:
            result = self._substitute(text)

        self._cache[key] = result
        return result

    async def _translate_api(self, text: str) -> str:
        self.api_calls += 1
        params = {
            "client": "gtx",
            "sl": "auto",
            "tl": self.settings.translate_target_lang,
            "dt": "t",
            "q": text,
            "key": self.settings.translate_api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=self.settings.request_timeout, transport=self.transport) as client:
                response = await client.get(self.settings.translate_api_url, params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TranslationFailure(f"{type(e).__name__}: {e}") from e

        translated = _first_leaf(payload)
        if not isinstance(translated, str) or not translated.strip():
            raise TranslationFailure("unexpected response shape")
        return translated.strip()

    def _substitute(self, text: str) -> str:
        self.table_calls += 1
        result = text
        for pattern, replacement in _COMPILED_TABLE:
            result = pattern.sub(replacement, result)
        return result

    def summarize(self, text: str) -> str:
        """Shorten long text to its first sentence plus up to two key terms."""
        if not text or len(text) <= SUMMARY_TRIGGER_LENGTH:
            return text or ""

        first = _SENTENCE_END_RE.split(text.strip(), maxsplit=1)[0].strip()
        summary = ""
        if len(first) >= MIN_SENTENCE_LENGTH:
            if len(first) > SUMMARY_TRIGGER_LENGTH:
                first = first[:TRUNCATE_AT] + "..."
            lowered_first = first.lower()
            lowered_text = text.lower()
            extra = [
                term for term in KEY_TERMS
                if term.lower() in lowered_text and term.lower() not in lowered_first
            ][:2]
            summary = f"{first} ({', '.join(extra)})" if extra else first

        if len(summary) < MIN_SENTENCE_LENGTH:
            return text[:TRUNCATE_AT] + "..."
        return summary
