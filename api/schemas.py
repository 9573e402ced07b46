# api/schemas.py

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, model_validator

from spansync.models import RemoveSpan, ReplaceSpanText, Recommendation, Span


class SpanSchema(BaseModel):
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    id: Optional[str] = None
    category: Optional[str] = None
    quote: Optional[str] = None
    left_ctx: Optional[str] = None
    right_ctx: Optional[str] = None
    confidence: Optional[float] = None
    source: Optional[str] = None
    start_grapheme: Optional[int] = None
    end_grapheme: Optional[int] = None

    @model_validator(mode="after")
    def check_range(self) -> "SpanSchema":
        if self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")
        return self

    def to_span(self) -> Span:
        return Span(**self.model_dump())

    @classmethod
    def from_span(cls, span: Span) -> "SpanSchema":
        return cls(
            start=span.start,
            end=span.end,
            id=span.id,
            category=span.category,
            quote=span.quote,
            left_ctx=span.left_ctx,
            right_ctx=span.right_ctx,
            confidence=span.confidence,
            source=span.source,
            start_grapheme=span.start_grapheme,
            end_grapheme=span.end_grapheme,
        )


class ReplaceEditSchema(BaseModel):
    type: Literal["replaceSpanText"] = "replaceSpanText"
    replacement_text: str
    target_span_id: Optional[str] = None
    anchor_quote: Optional[str] = None


class RemoveEditSchema(BaseModel):
    type: Literal["removeSpan"] = "removeSpan"
    target_span_id: Optional[str] = None
    anchor_quote: Optional[str] = None


EditSchema = Annotated[Union[ReplaceEditSchema, RemoveEditSchema], Field(discriminator="type")]


def edit_from_schema(edit: EditSchema):
    if isinstance(edit, ReplaceEditSchema):
        return ReplaceSpanText(
            replacement_text=edit.replacement_text,
            target_span_id=edit.target_span_id,
            anchor_quote=edit.anchor_quote,
        )
    return RemoveSpan(target_span_id=edit.target_span_id, anchor_quote=edit.anchor_quote)


class RecommendationSchema(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    rationale: Optional[str] = None
    edits: List[EditSchema] = Field(default_factory=list)

    def to_recommendation(self) -> Recommendation:
        return Recommendation(
            edits=[edit_from_schema(e) for e in self.edits],
            id=self.id,
            title=self.title,
            rationale=self.rationale,
        )


class RelocateRequest(BaseModel):
    text: str
    quote: str
    left_ctx: Optional[str] = None
    right_ctx: Optional[str] = None
    preferred_index: Optional[int] = None


class RelocateResponse(BaseModel):
    start: Optional[int] = None
    end: Optional[int] = None


class ApplyEditRequest(BaseModel):
    document: str
    edit: EditSchema
    target_span: Optional[SpanSchema] = None


class ApplyEditResponse(BaseModel):
    updated_document: Optional[str] = None
    match_start: Optional[int] = None
    match_end: Optional[int] = None


class ApplyRecommendationsRequest(BaseModel):
    document: str
    spans: List[SpanSchema] = Field(default_factory=list)
    recommendations: List[RecommendationSchema]


class ApplyRecommendationsResponse(BaseModel):
    updated_document: Optional[str] = None
    updated_spans: Optional[List[SpanSchema]] = None
    applied_edits: int = 0
    skipped_edits: int = 0


class IngestRequest(BaseModel):
    text: str
    spans: List[Dict[str, Any]]


class IngestResponse(BaseModel):
    spans: List[SpanSchema]
