"""
Utility functions for deck layout processing.

Includes text statistics, keyword extraction, numeric parsing and correlation.
"""

import math
import re
from collections import Counter
from typing import Any, Iterable, List, Optional, Sequence

SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
TOKEN_RE = re.compile(r"[a-z0-9]+(?:'[a-z]+)?")

STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
    "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "must", "can", "this",
    "that", "these", "those", "i", "you", "he", "she", "it", "we", "they",
    "their", "there", "then", "than", "them", "what", "which", "when",
    "where", "while", "with", "into", "also", "about", "your", "our",
})


def clamp01(value: float) -> float:
    """Clamp a score to [0, 1]; NaN becomes 0."""
    if value is None or value != value:
        return 0.0
    return max(0.0, min(1.0, float(value)))


def collapse_spaces(s: str) -> str:
    return re.sub(r"\s+", " ", s or "").strip()


def count_words(text: str) -> int:
    return len((text or "").split())


def split_sentences(text: str) -> List[str]:
    """
    Split text on sentence terminators (., !, ?) and drop empty pieces.

    Examples:
        >>> split_sentences("One. Two!  Three?")
        ['One', 'Two', 'Three']
    """
    return [s.strip() for s in SENTENCE_SPLIT_RE.split(text or "") if s.strip()]


def first_sentence(text: str) -> str:
    return SENTENCE_SPLIT_RE.split(text or "", maxsplit=1)[0].strip()


def tokenize(text: str) -> List[str]:
    """Lower-case word tokens (letters, digits, simple apostrophes)."""
    return TOKEN_RE.findall((text or "").lower())


def extract_keywords(
    text: str,
    max_keywords: int = 10,
    min_length: int = 4,
    stopwords: Iterable[str] = STOPWORDS,
) -> List[str]:
    """
    Extract the most frequent terms from text.

    Tokens shorter than `min_length` and stop words are ignored. Ties keep
    first-occurrence order.

    Args:
        text: Text to extract keywords from
        max_keywords: Maximum number of keywords to return
        min_length: Minimum keyword length
        stopwords: Words to ignore

    Returns:
        List of keywords sorted by frequency

    Examples:
        >>> extract_keywords("Revenue grew. Revenue targets beat forecasts.", max_keywords=2)
        ['revenue', 'grew']
    """
    if not text:
        return []

    stop = set(stopwords)
    words = [w for w in tokenize(text) if len(w) >= min_length and w not in stop]
    freq = Counter(words)
    return [word for word, _ in freq.most_common(max_keywords)]


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a table cell into a finite float.

    Returns None for empty strings, booleans, non-numeric text, NaN and
    infinities.

    Examples:
        >>> parse_number(" 42.5 ")
        42.5
        >>> parse_number("") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        s = str(value).strip()
        if not s:
            return None
        try:
            number = float(s)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equal-length samples.

    A zero denominator (constant column or empty input) yields 0.
    """
    n = min(len(x), len(y))
    if n == 0:
        return 0.0
    x, y = x[:n], y[:n]
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_x2 = sum(a * a for a in x)
    sum_y2 = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    radicand = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if radicand <= 0:
        return 0.0
    return numerator / math.sqrt(radicand)
