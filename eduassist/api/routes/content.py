"""Translation and summary tools."""

from fastapi import APIRouter

from eduassist.api.deps import CurrentUser
from eduassist.schemas.content import (
    SummaryRequest,
    SummaryResponse,
    TranslateRequest,
    TranslateResponse,
)
from eduassist.services import ai_gateway

router = APIRouter(tags=["content"])


@router.post("/translate", response_model=TranslateResponse)
async def translate(request: TranslateRequest, current_user: CurrentUser) -> TranslateResponse:
    translation = await ai_gateway.translate(request.content, target_language=request.target_language)
    return TranslateResponse(translation=translation)


@router.post("/summary/generate", response_model=SummaryResponse)
async def generate_summary(request: SummaryRequest, current_user: CurrentUser) -> SummaryResponse:
    """Summarize study material, optionally steering toward given focus areas."""
    summary = await ai_gateway.summarize(
        request.content,
        summary_type=request.summary_type,
        focus_areas=request.focus_areas,
    )
    return SummaryResponse(summary=summary)
