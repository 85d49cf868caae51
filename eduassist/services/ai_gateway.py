"""
AI gateway: every LLM call in the application goes through here.

``AIGateway.complete(task, **params)`` dispatches to a fixed instruction
template per task. Tasks with structured output ask the model for a single
JSON object and fall back to empty lists / placeholder strings when the reply
can't be parsed. Any failure reaching the caller is an ``AIGatewayError``
with a localized message; the provider exception is only logged.
"""

import asyncio
import json
import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from anthropic import APIConnectionError, APIStatusError, AsyncAnthropic, RateLimitError
from pydantic import ValidationError

from eduassist.config import get_settings
from eduassist.errors import AIGatewayError
from eduassist.messages import t
from eduassist.schemas.ai import (
    AssessmentQuestion,
    ChatMetadata,
    ChatReply,
    DocumentAnalysis,
    PerformanceInsights,
)
from eduassist.services import prompts

logger = logging.getLogger(__name__)
settings = get_settings()

# Transient error types that warrant retrying
_RETRYABLE_ERRORS = (APIConnectionError, RateLimitError)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class AITask(str, Enum):
    """Task templates understood by the gateway."""

    CHAT = "chat"
    QUESTIONS = "questions"
    PERFORMANCE = "performance"
    SUMMARY = "summary"
    DOCUMENT = "document"
    TRANSLATION = "translation"


# Message key reported to the user when a task fails
_FAILURE_MESSAGES = {
    AITask.CHAT: "chat_failed",
    AITask.QUESTIONS: "questions_failed",
    AITask.PERFORMANCE: "performance_failed",
    AITask.SUMMARY: "summary_failed",
    AITask.DOCUMENT: "document_failed",
    AITask.TRANSLATION: "translation_failed",
}


async def _retry_anthropic(coro_factory, *, max_attempts: int = 3, base_delay: float = 1.0):
    """
    Retry an Anthropic API call with exponential backoff.

    Args:
        coro_factory: Callable that returns a new coroutine each invocation.
        max_attempts: Maximum number of attempts.
        base_delay: Base delay in seconds (doubles each retry).
    """
    for attempt in range(max_attempts):
        try:
            return await coro_factory()
        except (*_RETRYABLE_ERRORS, APIStatusError) as e:
            overloaded = isinstance(e, APIStatusError) and e.status_code == 529
            retryable = isinstance(e, _RETRYABLE_ERRORS) or overloaded
            if not retryable or attempt == max_attempts - 1:
                raise
            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Anthropic API transient error (attempt %d/%d), retrying in %.1fs: %s",
                attempt + 1, max_attempts, delay, str(e),
            )
            await asyncio.sleep(delay)


def parse_json_object(text: str) -> dict:
    """
    Parse a model reply that should be one JSON object.

    Tolerates markdown code fences and chatter around the object.
    Returns an empty dict if nothing usable is found.
    """
    cleaned = _CODE_FENCE.sub("", text.strip())
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        logger.warning("Model reply contained no JSON object")
        return {}
    try:
        data = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError:
        logger.warning("Model reply was not valid JSON")
        return {}
    return data if isinstance(data, dict) else {}


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if isinstance(item, (str, int, float)) and str(item).strip()]


def _normalize_history(history: list[dict]) -> list[dict]:
    """Make stored history acceptable to the Messages API: starts with user, roles alternate."""
    normalized: list[dict] = []
    for message in history:
        role, content = message["role"], message["content"]
        if not normalized and role != "user":
            continue
        if normalized and normalized[-1]["role"] == role:
            normalized[-1]["content"] += "\n\n" + content
        else:
            normalized.append({"role": role, "content": content})
    # The new user turn is appended by the caller
    if normalized and normalized[-1]["role"] == "user":
        normalized.pop()
    return normalized


class AIGateway:
    """Adapter between domain requests and the Anthropic Messages API."""

    def __init__(self):
        """Initialize Anthropic client."""
        self.client = AsyncAnthropic(api_key=settings.anthropic_api_key)
        self._handlers = {
            AITask.CHAT: self._chat,
            AITask.QUESTIONS: self._questions,
            AITask.PERFORMANCE: self._performance,
            AITask.SUMMARY: self._summary,
            AITask.DOCUMENT: self._document,
            AITask.TRANSLATION: self._translation,
        }

    async def complete(self, task: AITask, **params: Any) -> Any:
        """Run ``task`` with ``params``; wrap every failure in AIGatewayError."""
        try:
            return await self._handlers[task](**params)
        except AIGatewayError:
            raise
        except Exception as e:
            logger.exception("AI task '%s' failed", task.value)
            raise AIGatewayError(t(_FAILURE_MESSAGES[task])) from e

    # -------------------------------------------------------------------------
    # Public task helpers
    # -------------------------------------------------------------------------

    async def chat_reply(
        self,
        message: str,
        *,
        subject: str | None = None,
        history: list[dict] | None = None,
    ) -> ChatReply:
        return await self.complete(AITask.CHAT, message=message, subject=subject, history=history or [])

    async def generate_questions(
        self,
        subject: str,
        *,
        chapter: str | None = None,
        difficulty: str = "medium",
        count: int = 5,
    ) -> list[AssessmentQuestion]:
        return await self.complete(
            AITask.QUESTIONS, subject=subject, chapter=chapter, difficulty=difficulty, count=count
        )

    async def analyze_performance(
        self,
        subject: str,
        *,
        chapter: str | None,
        score: float,
        total_questions: int,
        correct_answers: int,
        outcomes: list[bool],
    ) -> PerformanceInsights:
        return await self.complete(
            AITask.PERFORMANCE,
            subject=subject,
            chapter=chapter,
            score=score,
            total_questions=total_questions,
            correct_answers=correct_answers,
            outcomes=outcomes,
        )

    async def summarize(
        self,
        content: str,
        *,
        summary_type: str = "general",
        focus_areas: list[str] | None = None,
    ) -> str:
        return await self.complete(
            AITask.SUMMARY, content=content, summary_type=summary_type, focus_areas=focus_areas or []
        )

    async def analyze_document(self, content: str, *, file_name: str) -> DocumentAnalysis:
        return await self.complete(AITask.DOCUMENT, content=content, file_name=file_name)

    async def translate(self, content: str, *, target_language: str = "ar") -> str:
        return await self.complete(AITask.TRANSLATION, content=content, target_language=target_language)

    # -------------------------------------------------------------------------
    # Task implementations
    # -------------------------------------------------------------------------

    async def _create(
        self,
        *,
        messages: list[dict],
        system: str,
        temperature: float,
        max_tokens: int | None = None,
    ):
        return await _retry_anthropic(
            lambda: self.client.messages.create(
                model=settings.llm_model,
                max_tokens=max_tokens or settings.llm_max_tokens,
                system=system,
                temperature=temperature,
                messages=messages,
            )
        )

    @staticmethod
    def _text(message) -> str:
        return "".join(block.text for block in message.content if block.type == "text").strip()

    async def _ask_json(self, prompt: str) -> dict:
        message = await self._create(
            messages=[{"role": "user", "content": prompt}],
            system=prompts.JSON_SYSTEM_PROMPT,
            temperature=settings.llm_structured_temperature,
        )
        return parse_json_object(self._text(message))

    async def _chat(self, *, message: str, subject: str | None, history: list[dict]) -> ChatReply:
        subject_line = f"\nالتخصص الحالي: {subject}\n" if subject else ""
        reply = await self._create(
            messages=_normalize_history(history) + [{"role": "user", "content": message}],
            system=prompts.TUTOR_SYSTEM_PROMPT.format(subject_line=subject_line),
            temperature=settings.llm_chat_temperature,
        )
        content = self._text(reply)
        if not content:
            raise AIGatewayError(t("chat_failed"))
        return ChatReply(
            content=content,
            metadata=ChatMetadata(
                model=getattr(reply, "model", None) or settings.llm_model,
                timestamp=datetime.now(timezone.utc).isoformat(),
                subject=subject,
            ),
        )

    async def _questions(
        self, *, subject: str, chapter: str | None, difficulty: str, count: int
    ) -> list[AssessmentQuestion]:
        data = await self._ask_json(
            prompts.QUESTIONS_PROMPT.format(
                count=count,
                subject=subject,
                chapter_line=f"الفصل: {chapter}" if chapter else "",
                difficulty=difficulty,
            )
        )
        raw_items = data.get("questions")
        if not isinstance(raw_items, list):
            return []

        questions = []
        for item in raw_items:
            try:
                questions.append(AssessmentQuestion.model_validate(item))
            except ValidationError:
                logger.warning("Dropping malformed assessment question from model output")
        return questions[:count]

    async def _performance(
        self,
        *,
        subject: str,
        chapter: str | None,
        score: float,
        total_questions: int,
        correct_answers: int,
        outcomes: list[bool],
    ) -> PerformanceInsights:
        answer_pattern = "\n".join(
            f"السؤال {i}: {'صحيح' if correct else 'خطأ'}" for i, correct in enumerate(outcomes, start=1)
        )
        data = await self._ask_json(
            prompts.PERFORMANCE_PROMPT.format(
                subject=subject,
                chapter_line=f"الفصل: {chapter}" if chapter else "",
                total_questions=total_questions,
                correct_answers=correct_answers,
                score=f"{score:.2f}",
                answer_pattern=answer_pattern,
            )
        )
        return PerformanceInsights(
            weak_areas=_string_list(data.get("weak_areas")),
            recommendations=_string_list(data.get("recommendations")),
        )

    async def _summary(self, *, content: str, summary_type: str, focus_areas: list[str]) -> str:
        prompt = prompts.SUMMARY_PROMPTS[summary_type].format(content=content)
        if focus_areas:
            prompt += prompts.SUMMARY_FOCUS_SUFFIX.format(focus_areas="، ".join(focus_areas))
        message = await self._create(
            messages=[{"role": "user", "content": prompt}],
            system=prompts.TUTOR_SYSTEM_PROMPT.format(subject_line=""),
            temperature=settings.llm_summary_temperature,
        )
        return self._text(message) or t("summary_unavailable")

    async def _document(self, *, content: str, file_name: str) -> DocumentAnalysis:
        excerpt = content[:settings.document_context_max_chars]
        if len(content) > settings.document_context_max_chars:
            excerpt += "\n\n[... تم اقتطاع بقية المحتوى ...]"
        data = await self._ask_json(prompts.DOCUMENT_PROMPT.format(file_name=file_name, content=excerpt))
        return DocumentAnalysis(
            subject=str(data.get("subject") or "").strip() or t("subject_unknown"),
            topics=_string_list(data.get("topics")),
            summary=str(data.get("summary") or "").strip() or t("no_summary"),
        )

    async def _translation(self, *, content: str, target_language: str) -> str:
        language = prompts.TRANSLATION_LANGUAGES[target_language]
        message = await self._create(
            messages=[{"role": "user", "content": prompts.TRANSLATION_PROMPT.format(language=language, content=content)}],
            system=prompts.TRANSLATOR_SYSTEM_PROMPT,
            temperature=settings.llm_translation_temperature,
        )
        translation = self._text(message)
        if not translation:
            raise AIGatewayError(t("translation_failed"))
        return translation


# Singleton instance
ai_gateway = AIGateway()
