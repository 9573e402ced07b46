# spansync/edit.py

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .canonical import normalize_text
from .config import DEFAULT_SETTINGS, EngineSettings
from .models import Edit, EditResult, Span
from .relocate import relocate_quote
from .validators import clamp, is_finite_number

logger = logging.getLogger(__name__)


def anchor_quote_for(edit: Edit, target_span: Optional[Span] = None) -> Optional[str]:
    """The target span's quote wins over the edit's own anchor quote."""
    for candidate in (target_span.quote if target_span else None, edit.anchor_quote):
        if candidate and candidate.strip():
            return candidate
    return None


def context_hints(
    document: str, target_span: Optional[Span], window: int
) -> Tuple[Optional[str], Optional[str]]:
    """
    Recorded context if the span carries any, otherwise a window of the
    current document around the span's last-known range.
    """
    if target_span is None:
        return None, None
    if target_span.left_ctx is not None or target_span.right_ctx is not None:
        return target_span.left_ctx, target_span.right_ctx
    if not (is_finite_number(target_span.start) and is_finite_number(target_span.end)):
        return None, None

    n = len(document)
    start = clamp(int(target_span.start), 0, n)
    end = clamp(int(target_span.end), start, n)
    return document[max(0, start - window):start], document[end:end + window]


def apply_edit(
    document: str,
    edit: Edit,
    target_span: Optional[Span] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> EditResult:
    """
    Apply a single replace/remove edit to the document.

    - no usable quote -> updated_document None
    - quote not found -> original document back, no match range
    - splice leaves the text as it was -> updated_document None

    The spliced text is normalized again. If that merges characters across
    the splice, the match range grows to cover them and replacement_text
    is whatever now sits in its place.
    """
    form = settings.normalization_form
    document = normalize_text(document, form)

    quote = anchor_quote_for(edit, target_span)
    if quote is None:
        logger.debug("Edit has no anchor quote (target=%s)", edit.target_span_id)
        return EditResult(updated_document=None)

    left_ctx, right_ctx = context_hints(document, target_span, settings.edit_window_chars)
    preferred = target_span.start if target_span is not None else None

    found = relocate_quote(
        document,
        quote,
        left_ctx=left_ctx,
        right_ctx=right_ctx,
        preferred_index=preferred,
        settings=settings,
    )
    if found is None:
        logger.debug("Could not relocate %r in current document", quote)
        return EditResult(updated_document=document)

    replacement = "" if edit.is_removal else normalize_text(edit.replacement_text, form)
    spliced = document[:found.start] + replacement + document[found.end:]
    updated = normalize_text(spliced, form)
    if updated == document:
        return EditResult(updated_document=None)

    match_start, match_end = found.start, found.end
    if updated != spliced:
        match_start, match_end, replacement = _widen_to_normalized(
            document, updated, match_start, match_end
        )

    return EditResult(
        updated_document=updated,
        match_start=match_start,
        match_end=match_end,
        replacement_text=replacement,
    )


def _widen_to_normalized(
    document: str, updated: str, match_start: int, match_end: int
) -> Tuple[int, int, str]:
    """
    Grow [match_start, match_end) until everything outside it is shared by
    document and updated, so that
    updated == document[:start] + replacement + document[end:].
    Needed when normalization composes characters across the splice.
    """
    prefix = 0
    limit = min(match_start, len(updated))
    while prefix < limit and document[prefix] == updated[prefix]:
        prefix += 1

    suffix = 0
    limit = min(len(document) - match_end, len(updated) - prefix)
    while suffix < limit and document[-1 - suffix] == updated[-1 - suffix]:
        suffix += 1

    return prefix, len(document) - suffix, updated[prefix:len(updated) - suffix]
