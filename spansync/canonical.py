# spansync/canonical.py

from __future__ import annotations

import bisect
import unicodedata
from dataclasses import dataclass
from typing import List, Optional

import regex as re


GRAPHEME_RE = re.compile(r"\X")


def normalize_text(text: Optional[str], form: str = "NFC") -> str:
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    return unicodedata.normalize(form, text)


@dataclass(frozen=True)
class Grapheme:
    index: int
    segment: str
    start: int
    end: int


class CanonicalText:
    """
    Normalized document text with grapheme <-> offset mapping.

    Offsets are code-point offsets into `normalized`. Grapheme indices count
    extended grapheme clusters, i.e. what a user sees as one character
    (an emoji with modifiers, a letter plus combining marks).
    """

    def __init__(self, text: Optional[str], form: str = "NFC"):
        self.form = form
        self.normalized = normalize_text(text, form)
        self._graphemes: Optional[List[Grapheme]] = None
        self._starts: Optional[List[int]] = None

    @property
    def graphemes(self) -> List[Grapheme]:
        if self._graphemes is None:
            self._graphemes = [
                Grapheme(index=i, segment=m.group(0), start=m.start(), end=m.end())
                for i, m in enumerate(GRAPHEME_RE.finditer(self.normalized))
            ]
        return self._graphemes

    @property
    def length(self) -> int:
        return len(self.graphemes)

    def __len__(self) -> int:
        return self.length

    def offset_for_grapheme(self, index: int) -> int:
        if index <= 0:
            return 0
        graphemes = self.graphemes
        if index >= len(graphemes):
            return len(self.normalized)
        return graphemes[index].start

    def grapheme_index_for_offset(self, offset: int) -> int:
        if offset <= 0:
            return 0
        if offset >= len(self.normalized):
            return self.length
        # offsets inside a cluster map to the cluster that contains them
        return bisect.bisect_right(self._grapheme_starts(), offset) - 1

    def _grapheme_starts(self) -> List[int]:
        if self._starts is None:
            self._starts = [g.start for g in self.graphemes]
        return self._starts

    def slice_graphemes(self, start: int, end: int) -> str:
        if end < start:
            start, end = end, start
        n = self.length
        start = max(0, min(n, start))
        end = max(0, min(n, end))
        return self.normalized[self.offset_for_grapheme(start):self.offset_for_grapheme(end)]

    def to_dict(self) -> dict:
        return {"normalized": self.normalized, "length": self.length}
