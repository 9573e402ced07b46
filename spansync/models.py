# spansync/models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union


@dataclass
class Span:
    start: int
    end: int
    id: Optional[str] = None
    category: Optional[str] = None
    quote: Optional[str] = None
    left_ctx: Optional[str] = None
    right_ctx: Optional[str] = None
    confidence: Optional[float] = None
    source: Optional[str] = None
    # Cached display offsets, derivable from start/end.
    start_grapheme: Optional[int] = None
    end_grapheme: Optional[int] = None

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def overlaps(self, other: "Span") -> bool:
        return not (self.end <= other.start or other.end <= self.start)

    def overlaps_range(self, start: int, end: int) -> bool:
        return self.start < end and self.end > start

    def length(self) -> int:
        return self.end - self.start

    def moved_to(self, start: int, end: int) -> "Span":
        """Copy placed at a new range; cached grapheme offsets are dropped."""
        return replace(self, start=start, end=end, start_grapheme=None, end_grapheme=None)


@dataclass
class Range:
    start: int
    end: int


@dataclass
class ReplaceSpanText:
    replacement_text: str
    target_span_id: Optional[str] = None
    anchor_quote: Optional[str] = None

    @property
    def is_removal(self) -> bool:
        return False


@dataclass
class RemoveSpan:
    target_span_id: Optional[str] = None
    anchor_quote: Optional[str] = None

    @property
    def is_removal(self) -> bool:
        return True


Edit = Union[ReplaceSpanText, RemoveSpan]


@dataclass
class Recommendation:
    edits: List[Edit] = field(default_factory=list)
    id: Optional[str] = None
    title: Optional[str] = None
    rationale: Optional[str] = None


@dataclass
class EditResult:
    updated_document: Optional[str]
    match_start: Optional[int] = None
    match_end: Optional[int] = None
    replacement_text: str = ""

    @property
    def matched(self) -> bool:
        return (
            self.updated_document is not None
            and self.match_start is not None
            and self.match_end is not None
        )


@dataclass
class RecommendationResult:
    updated_document: Optional[str] = None
    updated_spans: Optional[List[Span]] = None
    applied_edits: int = 0
    skipped_edits: int = 0


@dataclass
class HighlightSnapshot:
    spans: List[Span]
    signature: str
    metadata: Dict[str, Any] = field(default_factory=dict)
