"""Schemas for translation and summary tools."""

from pydantic import BaseModel, Field

from eduassist.schemas.ai import Language, SummaryType
from eduassist.schemas.base import BaseSchema


class TranslateRequest(BaseSchema):
    content: str = Field(..., min_length=1, max_length=20000)
    target_language: Language = "ar"


class TranslateResponse(BaseModel):
    translation: str


class SummaryRequest(BaseSchema):
    content: str = Field(..., min_length=1, max_length=50000)
    focus_areas: list[str] = Field(default_factory=list)
    summary_type: SummaryType = "general"


class SummaryResponse(BaseModel):
    summary: str
