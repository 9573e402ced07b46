# spansync/pipeline.py

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .canonical import normalize_text
from .config import DEFAULT_SETTINGS, EngineSettings
from .edit import apply_edit
from .models import Recommendation, RecommendationResult, Span
from .rebase import RebaseTarget, rebase_spans

logger = logging.getLogger(__name__)


def _span_by_id(spans: Sequence[Span], span_id: Optional[str]) -> Optional[Span]:
    if span_id is None:
        return None
    for span in spans:
        if span.id == span_id:
            return span
    return None


def apply_recommendation(
    recommendation: Recommendation,
    document: str,
    spans: Optional[Sequence[Span]] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> RecommendationResult:
    """
    Apply every edit of a recommendation in order against the evolving
    document and span list.

    Edits that cannot be anchored or relocated are skipped; the rest still
    apply. If the final text equals the (normalized) input, both updated
    fields are None.
    """
    original = normalize_text(document, settings.normalization_form)
    working_doc = original
    working_spans: List[Span] = list(spans or [])
    applied = 0
    skipped = 0

    for edit in recommendation.edits:
        target_span = _span_by_id(working_spans, edit.target_span_id)
        result = apply_edit(working_doc, edit, target_span, settings)

        if not result.matched:
            skipped += 1
            logger.debug(
                "Skipped edit %s in recommendation %s", edit.target_span_id, recommendation.id
            )
            continue

        working_spans = rebase_spans(
            working_spans,
            result.match_start,
            result.match_end,
            len(result.replacement_text),
            target=RebaseTarget.from_span(target_span, edit.target_span_id),
            remove=edit.is_removal,
            replacement_text=None if edit.is_removal else result.replacement_text,
        )
        working_doc = result.updated_document
        applied += 1

    if working_doc == original:
        return RecommendationResult(applied_edits=applied, skipped_edits=skipped)

    return RecommendationResult(
        updated_document=working_doc,
        updated_spans=working_spans,
        applied_edits=applied,
        skipped_edits=skipped,
    )


def apply_recommendations(
    recommendations: Iterable[Recommendation],
    document: str,
    spans: Optional[Sequence[Span]] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> RecommendationResult:
    """Apply several selected recommendations one after another."""
    original = normalize_text(document, settings.normalization_form)
    working_doc = original
    working_spans: List[Span] = list(spans or [])
    applied = 0
    skipped = 0

    for rec in recommendations:
        result = apply_recommendation(rec, working_doc, working_spans, settings)
        applied += result.applied_edits
        skipped += result.skipped_edits
        if result.updated_document is None:
            continue
        working_doc = result.updated_document
        if result.updated_spans is not None:
            working_spans = result.updated_spans

    if working_doc == original:
        return RecommendationResult(applied_edits=applied, skipped_edits=skipped)

    return RecommendationResult(
        updated_document=working_doc,
        updated_spans=working_spans,
        applied_edits=applied,
        skipped_edits=skipped,
    )
