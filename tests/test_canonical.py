# tests/test_canonical.py

from spansync.canonical import CanonicalText, normalize_text


THUMBS = "\U0001F44D\U0001F3FD"  # thumbs up + skin tone modifier


def test_normalize_text():
    assert normalize_text("Cafe\u0301") == "Caf\u00e9"
    assert normalize_text(None) == ""
    assert normalize_text(42) == "42"


def test_graphemes_group_clusters():
    canonical = CanonicalText("a" + THUMBS + "b")
    assert canonical.length == 3
    assert len(canonical) == 3
    assert [g.segment for g in canonical.graphemes] == ["a", THUMBS, "b"]
    assert [(g.start, g.end) for g in canonical.graphemes] == [(0, 1), (1, 3), (3, 4)]


def test_combining_marks_stay_with_their_base():
    canonical = CanonicalText("x\u0323\u0307y", form="NFD")
    assert canonical.length == 2


def test_offset_for_grapheme():
    canonical = CanonicalText("a" + THUMBS + "b")
    assert canonical.offset_for_grapheme(0) == 0
    assert canonical.offset_for_grapheme(2) == 3
    assert canonical.offset_for_grapheme(10) == 4
    assert canonical.offset_for_grapheme(-1) == 0


def test_grapheme_index_for_offset():
    canonical = CanonicalText("a" + THUMBS + "b")
    assert canonical.grapheme_index_for_offset(0) == 0
    assert canonical.grapheme_index_for_offset(1) == 1
    # inside the emoji cluster
    assert canonical.grapheme_index_for_offset(2) == 1
    assert canonical.grapheme_index_for_offset(3) == 2
    assert canonical.grapheme_index_for_offset(100) == 3
    assert canonical.grapheme_index_for_offset(-1) == 0


def test_slice_graphemes():
    canonical = CanonicalText("a" + THUMBS + "bc")
    assert canonical.slice_graphemes(1, 2) == THUMBS
    assert canonical.slice_graphemes(2, 1) == THUMBS
    assert canonical.slice_graphemes(2, 2) == ""
    assert canonical.slice_graphemes(-5, 100) == "a" + THUMBS + "bc"


def test_empty_text():
    canonical = CanonicalText(None)
    assert canonical.normalized == ""
    assert canonical.length == 0
    assert canonical.to_dict() == {"normalized": "", "length": 0}
