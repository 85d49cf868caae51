"""Typed results returned by the AI gateway, one model per task."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]
SummaryType = Literal["general", "weaknesses", "forgotten_points", "clarifications"]
Language = Literal["ar", "en"]


class ChatMetadata(BaseModel):
    """Generation details stored alongside an assistant message."""

    model: str
    timestamp: str
    subject: str | None = None


class ChatReply(BaseModel):
    content: str
    metadata: ChatMetadata


class AssessmentQuestion(BaseModel):
    """A multiple-choice item with exactly four options."""

    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=4, max_length=4)
    correct_answer: int = Field(
        ..., ge=0, le=3, validation_alias=AliasChoices("correct_answer", "correctAnswer")
    )
    explanation: str = ""
    difficulty: Difficulty = "medium"


class PerformanceInsights(BaseModel):
    weak_areas: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class DocumentAnalysis(BaseModel):
    subject: str
    topics: list[str] = Field(default_factory=list)
    summary: str
