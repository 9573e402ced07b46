# spansync/ingest.py

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, List, Optional

from .canonical import CanonicalText
from .config import DEFAULT_SETTINGS, EngineSettings
from .models import Span
from .relocate import relocate_quote
from .resolve import resolve_overlaps
from .validators import clamp, is_finite_number

logger = logging.getLogger(__name__)


def _raw_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _raw_id(value: Any) -> Optional[str]:
    # analyzers sometimes number their spans
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and is_finite_number(value):
        return str(int(value)) if value.is_integer() else str(value)
    return _raw_text(value)


def _span_from_raw(
    raw: Any, index: int, canonical: CanonicalText, window: int
) -> Optional[Span]:
    if not isinstance(raw, dict):
        return None

    category = raw.get("category")
    if not isinstance(category, str) or not category.strip():
        return None

    start, end = raw.get("start"), raw.get("end")
    if not (is_finite_number(start) and is_finite_number(end)) or end <= start:
        return None

    text = canonical.normalized
    start = clamp(int(start), 0, len(text))
    end = clamp(int(end), 0, len(text))
    if end <= start:
        return None

    left_ctx = raw.get("leftContext")
    if not isinstance(left_ctx, str):
        left_ctx = text[max(0, start - window):start]
    right_ctx = raw.get("rightContext")
    if not isinstance(right_ctx, str):
        right_ctx = text[end:end + window]

    confidence = raw.get("confidence")
    return Span(
        start=start,
        end=end,
        id=_raw_id(raw.get("id")) or f"llm_{category}_{index}_{start}_{end}",
        category=category,
        quote=text[start:end],
        left_ctx=left_ctx,
        right_ctx=right_ctx,
        confidence=float(confidence) if is_finite_number(confidence) else None,
        source=_raw_text(raw.get("source")) or "llm",
        start_grapheme=canonical.grapheme_index_for_offset(start),
        end_grapheme=canonical.grapheme_index_for_offset(end),
    )


def spans_from_analyzer(
    raw_spans: Iterable[Any],
    text: str,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> List[Span]:
    """
    Turn analyzer output into engine spans.

    Entries without a category or with an empty/invalid range are dropped.
    Offsets are read against the normalized text and clamped to it.
    Overlapping spans are resolved so the result never overlaps.
    """
    if raw_spans is None or not text:
        return []

    canonical = CanonicalText(text, settings.normalization_form)
    spans: List[Span] = []
    for index, raw in enumerate(raw_spans):
        span = _span_from_raw(raw, index, canonical, settings.context_window_chars)
        if span is None:
            logger.debug("Dropped analyzer span #%d: %r", index, raw)
            continue
        spans.append(span)

    return resolve_overlaps(spans)


def reanchor_span(
    span: Span,
    canonical: CanonicalText,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Optional[Span]:
    """
    Find a possibly stale span again in the current text and refresh its
    offsets, quote and context. None if its quote is gone.
    """
    if not span.quote or not canonical.normalized:
        return None

    found = relocate_quote(
        canonical.normalized,
        span.quote,
        left_ctx=span.left_ctx or "",
        right_ctx=span.right_ctx or "",
        settings=settings,
    )
    if found is None:
        return None

    window = settings.context_window_chars
    start_g = canonical.grapheme_index_for_offset(found.start)
    end_g = canonical.grapheme_index_for_offset(found.end)
    left_start = max(0, start_g - window)
    right_end = min(canonical.length, end_g + window)

    return replace(
        span,
        id=span.id if span.id is not None else f"display_{found.start}_{found.end}",
        start=found.start,
        end=found.end,
        start_grapheme=start_g,
        end_grapheme=end_g,
        quote=canonical.slice_graphemes(start_g, end_g),
        left_ctx=canonical.slice_graphemes(left_start, start_g),
        right_ctx=canonical.slice_graphemes(end_g, right_end),
    )
