# tests/test_ingest.py

from spansync.canonical import CanonicalText
from spansync.ingest import reanchor_span, spans_from_analyzer
from spansync.models import Span
from spansync.resolve import resolve_overlaps


TEXT = "Slow dolly shot of a neon-lit alley at night"


def test_analyzer_spans_are_normalized():
    raw = [
        {"start": 5, "end": 15, "category": "camera", "confidence": 0.9},
        {"start": 21, "end": 29, "category": "lighting"},
        {"start": 30, "end": 100, "category": "setting"},
        {"start": 3, "end": 2, "category": "broken"},
        {"start": 0, "end": 4},
        {"start": 0, "end": 4, "category": "   "},
        {"start": "0", "end": 4, "category": "text"},
        "junk",
        {"start": 6, "end": 9, "category": "camera", "confidence": 0.5},
    ]

    spans = spans_from_analyzer(raw, TEXT)

    assert [(s.category, s.start, s.end) for s in spans] == [
        ("camera", 5, 15),
        ("lighting", 21, 29),
        ("setting", 30, 44),
    ]
    camera, lighting, setting = spans
    assert camera.id == "llm_camera_0_5_15"
    assert camera.quote == "dolly shot"
    assert camera.left_ctx == "Slow "
    assert camera.right_ctx == " of a neon-lit alley"
    assert camera.confidence == 0.9
    assert camera.source == "llm"
    assert (camera.start_grapheme, camera.end_grapheme) == (5, 15)
    assert lighting.confidence is None
    assert setting.quote == "alley at night"
    assert setting.right_ctx == ""


def test_analyzer_context_and_ids_are_kept():
    raw = [{
        "id": "span-7",
        "start": 21,
        "end": 29,
        "category": "lighting",
        "leftContext": "a ",
        "rightContext": " alley",
        "source": "nlp",
    }]
    (span,) = spans_from_analyzer(raw, TEXT)
    assert span.id == "span-7"
    assert (span.left_ctx, span.right_ctx) == ("a ", " alley")
    assert span.source == "nlp"


def test_analyzer_overlaps_prefer_confidence_then_length():
    raw = [
        {"start": 0, "end": 10, "category": "camera", "confidence": 0.4},
        {"start": 5, "end": 15, "category": "camera", "confidence": 0.8},
        {"start": 21, "end": 29, "category": "lighting", "confidence": 0.5},
        {"start": 21, "end": 35, "category": "setting", "confidence": 0.5},
    ]
    spans = spans_from_analyzer(raw, TEXT)
    assert [(s.start, s.end) for s in spans] == [(5, 15), (21, 35)]
    for left, right in zip(spans, spans[1:]):
        assert not left.overlaps(right)


def test_analyzer_empty_inputs():
    assert spans_from_analyzer(None, TEXT) == []
    assert spans_from_analyzer([{"start": 0, "end": 4, "category": "x"}], "") == []


def test_reanchor_refreshes_stale_span():
    stale = Span(start=0, end=5, quote="neon-lit", left_ctx="a ", right_ctx=" alley", category="lighting")
    span = reanchor_span(stale, CanonicalText(TEXT))

    assert (span.start, span.end) == (21, 29)
    assert span.id == "display_21_29"
    assert (span.start_grapheme, span.end_grapheme) == (21, 29)
    assert span.quote == "neon-lit"
    assert span.left_ctx == "low dolly shot of a "
    assert span.right_ctx == " alley at night"
    assert span.category == "lighting"


def test_reanchor_keeps_existing_id():
    span = reanchor_span(Span(start=0, end=0, id="keep", quote="alley"), CanonicalText(TEXT))
    assert span.id == "keep"
    assert (span.start, span.end) == (30, 35)


def test_reanchor_missing_quote():
    assert reanchor_span(Span(start=0, end=3, quote="fog"), CanonicalText(TEXT)) is None
    assert reanchor_span(Span(start=0, end=3), CanonicalText(TEXT)) is None
    assert reanchor_span(Span(start=0, end=3, quote="fog"), CanonicalText("")) is None


def test_analyzer_ids_and_sources_are_coerced_to_text():
    raw = [
        {"id": 7, "start": 0, "end": 4, "category": "motion", "source": 3},
        {"id": 2.0, "start": 5, "end": 10, "category": "camera", "source": "model"},
        {"id": ["a"], "start": 21, "end": 29, "category": "lighting"},
        {"id": True, "start": 30, "end": 35, "category": "setting", "source": "  "},
    ]
    spans = spans_from_analyzer(raw, TEXT)

    assert [s.id for s in spans] == ["7", "2", "llm_lighting_2_21_29", "llm_setting_3_30_35"]
    assert [s.source for s in spans] == ["llm", "model", "llm", "llm"]


def test_resolve_overlaps_prefers_confidence_then_length():
    low = Span(start=0, end=10, id="low", confidence=0.2)
    high = Span(start=5, end=8, id="high", confidence=0.9)
    short = Span(start=20, end=22, id="short")
    long = Span(start=20, end=26, id="long")
    apart = Span(start=30, end=31, id="apart")

    result = resolve_overlaps([apart, short, low, long, high])

    assert [s.id for s in result] == ["high", "long", "apart"]
