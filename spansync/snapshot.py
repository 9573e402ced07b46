# spansync/snapshot.py

from __future__ import annotations

import hashlib
from typing import List, Optional

from .canonical import normalize_text
from .config import DEFAULT_SETTINGS, EngineSettings
from .models import HighlightSnapshot, Recommendation, RecommendationResult, Span
from .pipeline import apply_recommendation
from .rebase import RebaseTarget, rebase_spans


def document_signature(document: str, settings: EngineSettings = DEFAULT_SETTINGS) -> str:
    text = normalize_text(document, settings.normalization_form)
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    return digest[:settings.signature_length]


def build_snapshot(
    document: str,
    spans: List[Span],
    metadata: Optional[dict] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> HighlightSnapshot:
    return HighlightSnapshot(
        spans=list(spans),
        signature=document_signature(document, settings),
        metadata=dict(metadata or {}),
    )


def update_highlight_snapshot(
    snapshot: Optional[HighlightSnapshot],
    match_start: int,
    match_end: int,
    replacement_text: str,
    next_document: str,
    target: Optional[RebaseTarget] = None,
    remove: bool = False,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Optional[HighlightSnapshot]:
    """Rebase a snapshot's spans after one edit and re-sign it for next_document."""
    if snapshot is None:
        return None

    spans = rebase_spans(
        snapshot.spans,
        match_start,
        match_end,
        len(replacement_text),
        target=target,
        remove=remove,
        replacement_text=None if remove else replacement_text,
    )
    return build_snapshot(next_document, spans, snapshot.metadata, settings)


def apply_recommendation_to_snapshot(
    recommendation: Recommendation,
    document: str,
    snapshot: Optional[HighlightSnapshot],
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Optional[HighlightSnapshot]:
    """
    Snapshot flavour of apply_recommendation. None means nothing changed
    (or there was no snapshot to begin with).
    """
    if snapshot is None:
        return None

    result: RecommendationResult = apply_recommendation(
        recommendation, document, snapshot.spans, settings=settings
    )
    if result.updated_document is None:
        return None

    spans = result.updated_spans if result.updated_spans is not None else snapshot.spans
    return build_snapshot(result.updated_document, spans, snapshot.metadata, settings)
