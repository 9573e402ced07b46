# spansync/resolve.py

from __future__ import annotations

from typing import List
from .models import Span


def _conf(span: Span) -> float:
    return span.confidence if span.confidence is not None else 0.0


def resolve_overlaps(spans: List[Span]) -> List[Span]:
    """
    Reduce spans to a non-overlapping list, ordered by start.
    On overlap:
    - prefer higher confidence
    - break ties by preferring longer spans
    """

    if not spans:
        return []

    spans = sorted(spans, key=lambda s: (s.start, -s.end))

    result: List[Span] = []
    for span in spans:
        if not result:
            result.append(span)
            continue

        last = result[-1]
        if not last.overlaps(span):
            result.append(span)
            continue

        # On overlap, choose better span
        if _conf(span) > _conf(last) + 1e-6:
            result[-1] = span
        elif abs(_conf(span) - _conf(last)) <= 1e-6 and span.length() > last.length():
            result[-1] = span
        # else keep last

    return result
