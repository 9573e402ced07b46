import os
import logging
import logging.config

import yaml
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.schemas import (
    ApplyEditRequest,
    ApplyEditResponse,
    ApplyRecommendationsRequest,
    ApplyRecommendationsResponse,
    IngestRequest,
    IngestResponse,
    RelocateRequest,
    RelocateResponse,
    SpanSchema,
    edit_from_schema,
)
from spansync.config import DEFAULT_SETTINGS, EngineSettings, load_settings
from spansync.edit import apply_edit
from spansync.ingest import spans_from_analyzer
from spansync.pipeline import apply_recommendations
from spansync.relocate import relocate_quote


def setup_logging():
    cfg_path = os.path.join("configs", "logging.yaml")
    if os.path.exists(cfg_path):
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            os.makedirs("logs", exist_ok=True)
            logging.config.dictConfig(config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"[logging] Failed to load logging.yaml: {e}")
            logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.INFO)


def load_engine_settings() -> EngineSettings:
    cfg_path = os.environ.get("SPANSYNC_CONFIG", os.path.join("configs", "engine.yaml"))
    if os.path.exists(cfg_path):
        return load_settings(cfg_path)
    return DEFAULT_SETTINGS


setup_logging()
logger = logging.getLogger("api")
settings = load_engine_settings()

app = FastAPI(
    title="Span Sync",
    version="0.1.0",
    description="Keeps prompt span annotations aligned while AI-suggested edits are applied.",
)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/relocate", response_model=RelocateResponse)
def relocate(req: RelocateRequest) -> RelocateResponse:
    found = relocate_quote(
        req.text,
        req.quote,
        left_ctx=req.left_ctx,
        right_ctx=req.right_ctx,
        preferred_index=req.preferred_index,
        settings=settings,
    )
    if found is None:
        return RelocateResponse()
    return RelocateResponse(start=found.start, end=found.end)


@app.post("/edits/apply", response_model=ApplyEditResponse)
def apply_single_edit(req: ApplyEditRequest) -> ApplyEditResponse:
    target = req.target_span.to_span() if req.target_span else None
    result = apply_edit(req.document, edit_from_schema(req.edit), target, settings)
    return ApplyEditResponse(
        updated_document=result.updated_document,
        match_start=result.match_start,
        match_end=result.match_end,
    )


@app.post("/recommendations/apply", response_model=ApplyRecommendationsResponse)
def apply_selected_recommendations(req: ApplyRecommendationsRequest) -> ApplyRecommendationsResponse:
    logger.info("Applying %d recommendation(s)", len(req.recommendations))
    result = apply_recommendations(
        [r.to_recommendation() for r in req.recommendations],
        req.document,
        [s.to_span() for s in req.spans],
        settings,
    )
    if result.skipped_edits:
        logger.info("Skipped %d edit(s) that could not be anchored", result.skipped_edits)

    updated_spans = None
    if result.updated_spans is not None:
        updated_spans = [SpanSchema.from_span(s) for s in result.updated_spans]
    return ApplyRecommendationsResponse(
        updated_document=result.updated_document,
        updated_spans=updated_spans,
        applied_edits=result.applied_edits,
        skipped_edits=result.skipped_edits,
    )


@app.post("/spans/ingest", response_model=IngestResponse)
def ingest(req: IngestRequest) -> IngestResponse:
    spans = spans_from_analyzer(req.spans, req.text, settings)
    return IngestResponse(spans=[SpanSchema.from_span(s) for s in spans])
