from __future__ import annotations
import re
from collections import Counter
from typing import Any, Dict, Iterable, List, Tuple

# \w is Unicode-aware for str patterns: letters, digits, underscore.
WORD_RE = re.compile(r"\w+")

DEFAULT_TOP_K = 10

def _as_text(fragment: Any) -> str:
    return fragment if isinstance(fragment, str) else ""

def tokenize(text: str) -> List[str]:
    """Return lowercase word tokens of `text`, discarding punctuation and whitespace."""
    return WORD_RE.findall(_as_text(text).lower())

def _count(fragments: Iterable[Any]) -> Counter:
    joined = " ".join(_as_text(f) for f in fragments)
    return Counter(tokenize(joined))

def word_frequencies(fragments: Iterable[Any]) -> Dict[str, int]:
    """Token -> count across all fragments, ordered by first occurrence."""
    return dict(_count(fragments))

def analyze(fragments: Iterable[Any], k: int = DEFAULT_TOP_K) -> List[Tuple[str, int]]:
    """Rank the `k` most frequent tokens across a batch of OCR text fragments.

    Fragments are joined with a single space and lower-cased before scanning,
    so splitting text across frames never changes the counts. Missing or
    non-string fragments count as empty text.

    Ties keep first-occurrence order: Counter preserves insertion order and
    most_common() sorts stably.
    """
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValueError(f"k must be a positive integer, got {k!r}")
    return _count(fragments).most_common(k)

def chart_rows(ranked: Iterable[Tuple[str, int]]) -> List[Dict[str, Any]]:
    """(word, count) pairs as records for a bar chart, rank order preserved."""
    return [{"word": word, "count": count} for word, count in ranked]
