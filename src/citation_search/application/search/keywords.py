"""
KeywordExtractor - Free Text to Search Keywords

Turns a research question into at most five search keywords:

    1. Every Unicode punctuation or symbol character becomes whitespace
    2. Split on whitespace
    3. Drop tokens shorter than two characters
    4. Drop stop words
    5. De-duplicate, keeping the first occurrence
    6. Keep the first five

The transform is pure and never raises; degenerate input yields an empty
list. Running it on its own output (joined with spaces) returns the same
keywords.

Example:
    >>> KeywordExtractor().extract("deep learning, for image recognition!")
    ['deep', 'learning', 'image', 'recognition']
"""

from __future__ import annotations

import logging
import unicodedata

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 5
MIN_KEYWORD_LENGTH = 2

# Chinese function words plus common English ones
STOP_WORDS = frozenset(
    {
        "的", "了", "在", "是", "我", "有", "和", "就", "不", "人",
        "都", "一", "一个", "上", "也", "很", "到", "说", "要", "去",
        "你", "会", "着", "没有", "看", "好", "自己", "这",
        "a", "an", "the", "of", "in", "on", "for", "to", "and", "or",
        "with", "by", "at", "from", "as", "is", "are", "be", "about",
        "into", "how", "what", "which",
    }
)

# Glossary used when an English-language source asks for translated keywords
KEYWORD_TRANSLATIONS = {
    "机器学习": "machine learning",
    "深度学习": "deep learning",
    "人工智能": "artificial intelligence",
    "神经网络": "neural network",
    "图像识别": "image recognition",
    "自然语言处理": "natural language processing",
    "计算机视觉": "computer vision",
    "数据挖掘": "data mining",
}


def _strip_symbols(text: str) -> str:
    """Replace punctuation (P*) and symbol (S*) characters with spaces."""
    return "".join(
        " " if unicodedata.category(ch)[0] in ("P", "S") else ch
        for ch in text
    )


class KeywordExtractor:
    """Rule-based keyword extraction."""

    def __init__(
        self,
        stop_words: frozenset[str] = STOP_WORDS,
        max_keywords: int = MAX_KEYWORDS,
        min_length: int = MIN_KEYWORD_LENGTH,
    ) -> None:
        self.stop_words = stop_words
        self.max_keywords = max_keywords
        self.min_length = min_length

    def is_stop_word(self, token: str) -> bool:
        return token in self.stop_words or token.lower() in self.stop_words

    def extract(self, query: str | None) -> list[str]:
        if not query:
            return []

        keywords: list[str] = []
        seen: set[str] = set()
        for token in _strip_symbols(query).split():
            if len(token) < self.min_length or self.is_stop_word(token):
                continue
            if token in seen:
                continue
            seen.add(token)
            keywords.append(token)
            if len(keywords) == self.max_keywords:
                break

        logger.debug(f"Extracted keywords {keywords} from {query!r}")
        return keywords


def translate_keywords(keywords: list[str]) -> list[str]:
    """
    Map known Chinese keywords to English; unknown keywords pass through.

    Not part of the default search path: an English-language provider can
    opt in with its ``translate_keywords`` setting.
    """
    return [KEYWORD_TRANSLATIONS.get(keyword, keyword) for keyword in keywords]
