"""
Keyword extraction for article content.

Bag-of-words heuristics only: normalize, drop stop words, keep frequent
tokens plus any curated high-value terms and phrases.
"""

import logging
import re
from collections import Counter
from typing import List

from .config import (
    STOP_WORDS, HIGH_VALUE_KEYWORDS, MIN_TOKEN_LENGTH,
    MIN_KEYWORD_FREQUENCY, MAX_SINGLE_KEYWORDS, PHRASE_SIZES
)

logger = logging.getLogger(__name__)

# ASCII word characters only; accented letters split words
_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
_SPACE_RE = re.compile(r"\s+")
_NUMERIC_RE = re.compile(r"\d+")


def is_high_value(keyword: str) -> bool:
    return keyword in HIGH_VALUE_KEYWORDS


def normalize_text(content: str) -> str:
    """Lower-case, keep word characters, whitespace and hyphens, collapse spaces."""
    if not content:
        return ""
    text = _STRIP_RE.sub(" ", content.lower())
    return _SPACE_RE.sub(" ", text).strip()


def _is_significant(token: str) -> bool:
    return (
        len(token) >= MIN_TOKEN_LENGTH
        and token not in STOP_WORDS
        and not _NUMERIC_RE.fullmatch(token)
    )


def tokenize(content: str) -> List[str]:
    """Significant single tokens, in document order."""
    return [t for t in normalize_text(content).split(" ") if t and _is_significant(t)]


def extract_phrases(words: List[str]) -> List[str]:
    """
    Multi-word high-value phrases found as contiguous windows.

    The scan runs over the raw word sequence so short members such as
    "ai" in "generative ai" are still seen.
    """
    phrases = []
    for i in range(len(words)):
        for size in PHRASE_SIZES:
            window = words[i:i + size]
            if len(window) < size:
                continue
            phrase = " ".join(window)
            if is_high_value(phrase):
                phrases.append(phrase)
    return phrases


def extract_keywords(content: str) -> List[str]:
    """
    Extract meaningful keywords from article content.

    Steps:
    1. Normalize and split into words
    2. Collect 2- and 3-word high-value phrases
    3. Keep single tokens seen at least twice, or high-value ones
    4. Order singles by frequency, cap at MAX_SINGLE_KEYWORDS
    5. Phrases first, then singles, deduplicated

    Args:
        content: Article text

    Returns:
        Deterministic list of keywords (empty for empty input)
    """
    normalized = normalize_text(content)
    if not normalized:
        return []

    words = normalized.split(" ")
    phrases = extract_phrases(words)

    tokens = [w for w in words if _is_significant(w)]
    counts = Counter(tokens)

    # Counter preserves first-seen order, so equal counts stay in document order
    singles = [
        token for token, count in sorted(counts.items(), key=lambda item: -item[1])
        if count >= MIN_KEYWORD_FREQUENCY or is_high_value(token)
    ][:MAX_SINGLE_KEYWORDS]

    keywords = list(dict.fromkeys(phrases + singles))
    logger.debug(f"Extracted {len(keywords)} keywords ({len(phrases)} phrases)")
    return keywords
