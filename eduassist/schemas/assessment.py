"""Assessment and performance analytics schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from eduassist.schemas.ai import AssessmentQuestion, Difficulty
from eduassist.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class QuestionGenerateRequest(BaseSchema):
    subject: str = Field(..., min_length=1, max_length=255)
    chapter: str | None = Field(None, max_length=255)
    difficulty: Difficulty = "medium"
    count: int = Field(5, ge=1, le=20)


class QuestionGenerateResponse(BaseModel):
    questions: list[AssessmentQuestion]


class AnswerSubmission(BaseModel):
    question_id: int | str
    user_answer: int
    correct_answer: int

    @property
    def is_correct(self) -> bool:
        return self.user_answer == self.correct_answer


class PerformanceAnalyzeRequest(BaseSchema):
    subject: str = Field(..., min_length=1, max_length=255)
    chapter: str | None = Field(None, max_length=255)
    answers: list[AnswerSubmission] = Field(..., min_length=1)
    session_id: UUID | None = None


class PerformanceAnalysisRead(BaseSchema, IDMixin, CreatedAtMixin):
    """A stored assessment result."""

    user_id: UUID
    session_id: UUID | None
    subject: str
    chapter: str | None
    score: Decimal
    total_questions: int
    correct_answers: int
    weak_areas: list[str]
    recommendations: list[str]
