"""Assessment, analytics and content tool endpoint tests."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from eduassist.api.routes.assessment import compute_score
from eduassist.db import repository
from eduassist.db.models import PerformanceAnalytics
from eduassist.errors import AIGatewayError
from eduassist.messages import t
from eduassist.schemas.ai import AssessmentQuestion, PerformanceInsights
from eduassist.schemas.assessment import AnswerSubmission
from eduassist.services import ai_gateway


def _answers(*pairs) -> list[dict]:
    return [
        {"question_id": i, "user_answer": given, "correct_answer": expected}
        for i, (given, expected) in enumerate(pairs, start=1)
    ]


@pytest.mark.parametrize(
    ("pairs", "expected_score", "expected_correct"),
    [
        ([(0, 0), (1, 1), (2, 3)], Decimal("66.67"), 2),
        ([(0, 0)], Decimal("100.00"), 1),
        ([(0, 1), (2, 3)], Decimal("0.00"), 0),
        ([(0, 0), (1, 1), (2, 2), (3, 0)], Decimal("75.00"), 3),
    ],
)
def test_compute_score(pairs, expected_score, expected_correct):
    answers = [AnswerSubmission.model_validate(a) for a in _answers(*pairs)]

    score, correct = compute_score(answers)

    assert score == expected_score
    assert correct == expected_correct


@pytest.fixture
def stored_analysis():
    def _store(db, **kwargs):
        return PerformanceAnalytics(id=uuid4(), created_at=datetime.now(timezone.utc), **kwargs)

    with patch.object(repository, "create_performance_analytics", AsyncMock(side_effect=_store)) as mock:
        yield mock


async def test_analyze_scores_locally_and_stores_insights(client, auth_as, user, stored_analysis):
    auth_as()
    insights = PerformanceInsights(weak_areas=["Integration"], recommendations=["Practice substitution"])

    with patch.object(ai_gateway, "analyze_performance", AsyncMock(return_value=insights)) as analyze:
        response = await client.post(
            "/api/assessment/analyze",
            json={"subject": "Calculus", "chapter": "Integrals", "answers": _answers((0, 0), (1, 2), (3, 3))},
        )

    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["score"]) == Decimal("66.67")
    assert body["total_questions"] == 3
    assert body["correct_answers"] == 2
    assert body["weak_areas"] == ["Integration"]
    assert body["recommendations"] == ["Practice substitution"]

    kwargs = analyze.await_args.kwargs
    assert kwargs["outcomes"] == [True, False, True]
    assert kwargs["score"] == pytest.approx(66.67)
    assert stored_analysis.await_args.kwargs["user_id"] == user.id


async def test_analyze_requires_answers(client, auth_as, stored_analysis):
    auth_as()

    with patch.object(ai_gateway, "analyze_performance", AsyncMock()) as analyze:
        response = await client.post("/api/assessment/analyze", json={"subject": "Calculus", "answers": []})

    assert response.status_code == 400
    analyze.assert_not_awaited()
    stored_analysis.assert_not_awaited()


async def test_analyze_with_foreign_session_is_not_found(client, auth_as, make_user, make_session, stored_analysis):
    auth_as()
    foreign = make_session(make_user().id)

    with patch.object(repository, "get_chat_session", AsyncMock(return_value=foreign)), \
         patch.object(ai_gateway, "analyze_performance", AsyncMock()) as analyze:
        response = await client.post(
            "/api/assessment/analyze",
            json={"subject": "Calculus", "answers": _answers((0, 0)), "session_id": str(foreign.id)},
        )

    assert response.status_code == 404
    analyze.assert_not_awaited()


async def test_analyze_ai_failure_stores_nothing(client, auth_as, stored_analysis):
    auth_as()

    with patch.object(ai_gateway, "analyze_performance", AsyncMock(side_effect=AIGatewayError(t("performance_failed")))):
        response = await client.post("/api/assessment/analyze", json={"subject": "Calculus", "answers": _answers((0, 0))})

    assert response.status_code == 500
    assert response.json() == {"message": t("performance_failed"), "code": 500}
    stored_analysis.assert_not_awaited()


async def test_generate_questions(client, auth_as):
    auth_as()
    question = AssessmentQuestion(
        question="2 + 2 = ?", options=["3", "4", "5", "6"], correct_answer=1, explanation="Basic addition."
    )

    with patch.object(ai_gateway, "generate_questions", AsyncMock(return_value=[question])) as generate:
        response = await client.post("/api/assessment/generate", json={"subject": "Arithmetic", "count": 3})

    assert response.status_code == 200
    assert response.json()["questions"][0]["correct_answer"] == 1
    generate.assert_awaited_once_with("Arithmetic", chapter=None, difficulty="medium", count=3)


@pytest.mark.parametrize("count", [0, 21])
async def test_generate_questions_count_bounds(client, auth_as, count):
    auth_as()

    response = await client.post("/api/assessment/generate", json={"subject": "Arithmetic", "count": count})

    assert response.status_code == 400


async def test_performance_history_filters_by_subject(client, auth_as, user):
    auth_as()

    with patch.object(repository, "list_user_performance_analytics", AsyncMock(return_value=[])) as list_rows:
        response = await client.get("/api/analytics/performance", params={"subject": "Physics"})

    assert response.status_code == 200
    assert response.json() == []
    assert list_rows.await_args.args[1:] == (user.id, "Physics")


async def test_translate(client, auth_as):
    auth_as()

    with patch.object(ai_gateway, "translate", AsyncMock(return_value="Hello")) as translate:
        response = await client.post("/api/translate", json={"content": "مرحبا", "target_language": "en"})

    assert response.status_code == 200
    assert response.json() == {"translation": "Hello"}
    translate.assert_awaited_once_with("مرحبا", target_language="en")


async def test_translate_rejects_unknown_language(client, auth_as):
    auth_as()

    response = await client.post("/api/translate", json={"content": "Hi", "target_language": "fr"})

    assert response.status_code == 400


async def test_summary(client, auth_as):
    auth_as()

    with patch.object(ai_gateway, "summarize", AsyncMock(return_value="Key points...")) as summarize:
        response = await client.post(
            "/api/summary/generate",
            json={"content": "Long chapter text", "focus_areas": ["limits"], "summary_type": "weaknesses"},
        )

    assert response.status_code == 200
    assert response.json() == {"summary": "Key points..."}
    summarize.assert_awaited_once_with("Long chapter text", summary_type="weaknesses", focus_areas=["limits"])
