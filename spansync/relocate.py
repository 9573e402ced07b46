# spansync/relocate.py

from __future__ import annotations

from typing import List, Optional

import regex as re

from .canonical import normalize_text
from .config import DEFAULT_SETTINGS, EngineSettings
from .models import Range
from .validators import is_finite_number


def find_occurrences(text: str, quote: str) -> List[int]:
    """Start offsets of every occurrence of quote, overlapping ones included."""
    pattern = re.compile(re.escape(quote))
    return [m.start() for m in pattern.finditer(text, overlapped=True)]


def _left_score(text: str, start: int, left_ctx: str, limit: int) -> int:
    # count matching characters walking outward from the quote
    ctx = left_ctx[-limit:] if limit else ""
    before = text[max(0, start - len(ctx)):start]
    score = 0
    for a, b in zip(reversed(ctx), reversed(before)):
        if a != b:
            break
        score += 1
    return score


def _right_score(text: str, end: int, right_ctx: str, limit: int) -> int:
    ctx = right_ctx[:limit]
    after = text[end:end + len(ctx)]
    score = 0
    for a, b in zip(ctx, after):
        if a != b:
            break
        score += 1
    return score


def relocate_quote(
    text: Optional[str],
    quote: Optional[str],
    left_ctx: Optional[str] = None,
    right_ctx: Optional[str] = None,
    preferred_index: Optional[int] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Optional[Range]:
    """
    Find the occurrence of `quote` in `text` that best matches the hints.

    Candidates are ranked by:
      1. how many characters of left_ctx/right_ctx match the text right
         next to the occurrence
      2. distance of the occurrence start from preferred_index
      3. position in the text (earliest first)

    Returns None when quote is blank or absent. Offsets refer to the
    normalized form of `text`.
    """
    if not quote or not quote.strip() or not text:
        return None

    form = settings.normalization_form
    text = normalize_text(text, form)
    quote = normalize_text(quote, form)

    starts = find_occurrences(text, quote)
    if not starts:
        return None

    if not is_finite_number(preferred_index):
        preferred_index = None

    left = normalize_text(left_ctx, form)
    right = normalize_text(right_ctx, form)
    limit = settings.max_compare_chars
    qlen = len(quote)

    def rank(start: int):
        context = _left_score(text, start, left, limit) + _right_score(text, start + qlen, right, limit)
        distance = abs(start - preferred_index) if preferred_index is not None else 0
        return (-context, distance, start)

    best = min(starts, key=rank)
    return Range(start=best, end=best + qlen)
