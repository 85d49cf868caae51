"""Assessment generation, scoring and performance history routes."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from fastapi import APIRouter

from eduassist.api.deps import CurrentUser, DbSession, verify_ownership_or_404
from eduassist.db import repository
from eduassist.schemas.assessment import (
    AnswerSubmission,
    PerformanceAnalysisRead,
    PerformanceAnalyzeRequest,
    QuestionGenerateRequest,
    QuestionGenerateResponse,
)
from eduassist.services import ai_gateway

logger = logging.getLogger(__name__)
router = APIRouter(tags=["assessment"])


def compute_score(answers: list[AnswerSubmission]) -> tuple[Decimal, int]:
    """Percentage of correct answers rounded to 2 places, and the correct count."""
    correct = sum(1 for answer in answers if answer.is_correct)
    score = (Decimal(100) * correct / len(answers)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return score, correct


@router.post("/assessment/generate", response_model=QuestionGenerateResponse)
async def generate_questions(
    request: QuestionGenerateRequest,
    current_user: CurrentUser,
) -> QuestionGenerateResponse:
    """Generate multiple-choice questions for a subject and optional chapter."""
    questions = await ai_gateway.generate_questions(
        request.subject,
        chapter=request.chapter,
        difficulty=request.difficulty,
        count=request.count,
    )
    logger.info("Generated %d/%d questions for user %s", len(questions), request.count, current_user.id)
    return QuestionGenerateResponse(questions=questions)


@router.post("/assessment/analyze", response_model=PerformanceAnalysisRead)
async def analyze_performance(
    request: PerformanceAnalyzeRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> PerformanceAnalysisRead:
    """
    Score submitted answers and store the analysis.

    The score is computed here; the AI gateway only supplies weak areas
    and recommendations.
    """
    if request.session_id is not None:
        session = await repository.get_chat_session(db, request.session_id)
        verify_ownership_or_404(session, current_user, "session_not_found")

    score, correct = compute_score(request.answers)
    total = len(request.answers)
    insights = await ai_gateway.analyze_performance(
        request.subject,
        chapter=request.chapter,
        score=float(score),
        total_questions=total,
        correct_answers=correct,
        outcomes=[answer.is_correct for answer in request.answers],
    )

    row = await repository.create_performance_analytics(
        db,
        user_id=current_user.id,
        session_id=request.session_id,
        subject=request.subject,
        chapter=request.chapter,
        score=score,
        total_questions=total,
        correct_answers=correct,
        weak_areas=insights.weak_areas,
        recommendations=insights.recommendations,
    )
    await db.commit()
    return PerformanceAnalysisRead.model_validate(row)


@router.get("/analytics/performance", response_model=list[PerformanceAnalysisRead])
async def list_performance(
    current_user: CurrentUser,
    db: DbSession,
    subject: str | None = None,
) -> list[PerformanceAnalysisRead]:
    """Caller's assessment history, newest first, optionally for one subject."""
    rows = await repository.list_user_performance_analytics(db, current_user.id, subject)
    return [PerformanceAnalysisRead.model_validate(r) for r in rows]
