# spansync/rebase.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .models import Span
from .validators import is_finite_number, valid_match_range

logger = logging.getLogger(__name__)


@dataclass
class RebaseTarget:
    """What the caller knew about the edited span before the edit."""

    span_id: Optional[str] = None
    start: Optional[int] = None
    end: Optional[int] = None
    category: Optional[str] = None

    @classmethod
    def from_span(cls, span: Optional[Span], span_id: Optional[str] = None) -> "RebaseTarget":
        if span is None:
            return cls(span_id=span_id)
        return cls(
            span_id=span_id if span_id is not None else span.id,
            start=span.start,
            end=span.end,
            category=span.category,
        )


def find_target_index(
    spans: Sequence[Span],
    target: Optional[RebaseTarget],
    match_start: int,
    match_end: int,
) -> Optional[int]:
    """
    Locate the edited span, first hit wins:
      1. same id
      2. same range and category
      3. same range
      4. first span overlapping the matched range
    """
    if target is not None:
        if target.span_id is not None:
            for i, span in enumerate(spans):
                if span.id == target.span_id:
                    return i

        if target.start is not None and target.end is not None:
            same_range = [
                i for i, span in enumerate(spans)
                if span.start == target.start and span.end == target.end
            ]
            for i in same_range:
                if target.category is not None and spans[i].category == target.category:
                    return i
            if same_range:
                return same_range[0]

    for i, span in enumerate(spans):
        if span.overlaps_range(match_start, match_end):
            return i

    return None


def _shift(span: Span, delta: int) -> Span:
    """
    Move a span by delta code points. Finite grapheme offsets move by the
    same delta, which is only exact when every cluster between the edit and
    the span is a single code point. Consumers that need exact grapheme
    offsets should recompute them from the updated document.
    """
    start_g = span.start_grapheme + delta if is_finite_number(span.start_grapheme) else None
    end_g = span.end_grapheme + delta if is_finite_number(span.end_grapheme) else None
    return replace(
        span,
        start=span.start + delta,
        end=span.end + delta,
        start_grapheme=start_g,
        end_grapheme=end_g,
    )


def rebase_spans(
    spans: Sequence[Span],
    match_start: int,
    match_end: int,
    replacement_length: int,
    target: Optional[RebaseTarget] = None,
    remove: bool = False,
    replacement_text: Optional[str] = None,
) -> List[Span]:
    """
    Recompute span offsets after [match_start, match_end) was replaced by
    replacement_length characters.

    The target is dropped (remove=True) or stretched over the replacement;
    any other span touching the matched range is dropped; spans after it
    shift by the length delta. Survivors keep their relative order.

    Bad ranges or an unlocatable target return the spans unchanged.
    """
    spans = list(spans)

    if not valid_match_range(match_start, match_end) or not is_finite_number(replacement_length):
        return spans

    target_ix = find_target_index(spans, target, match_start, match_end)
    if target_ix is None:
        logger.debug("No span matches edit at [%s, %s)", match_start, match_end)
        return spans

    delta = replacement_length - (match_end - match_start)

    result: List[Span] = []
    for i, span in enumerate(spans):
        if i == target_ix:
            if remove:
                continue
            moved = span.moved_to(match_start, match_start + replacement_length)
            if replacement_text is not None:
                moved.quote = replacement_text
            result.append(moved)
        elif span.overlaps_range(match_start, match_end):
            continue
        elif span.start >= match_end:
            result.append(_shift(span, delta))
        else:
            result.append(span)

    return result
