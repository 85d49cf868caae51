"""Pydantic schemas for API request/response validation."""

from eduassist.schemas.user import UserRead
from eduassist.schemas.auth import GoogleAuthRequest, TokenResponse
from eduassist.schemas.chat import (
    ChatExchangeResponse,
    ChatMessageCreate,
    ChatMessageRead,
    ChatSessionCreate,
    ChatSessionRead,
    ChatSessionUpdate,
    ChatSessionWithMessages,
)
from eduassist.schemas.files import FileUploadResponse, UploadedFileRead
from eduassist.schemas.assessment import (
    AnswerSubmission,
    PerformanceAnalysisRead,
    PerformanceAnalyzeRequest,
    QuestionGenerateRequest,
    QuestionGenerateResponse,
)
from eduassist.schemas.content import SummaryRequest, SummaryResponse, TranslateRequest, TranslateResponse
from eduassist.schemas.subscriptions import PlanRead, SubscriptionCreate, SubscriptionResponse
from eduassist.schemas.support import SupportTicketCreate, SupportTicketRead, SupportTicketStatusUpdate

__all__ = [
    # User / auth
    "UserRead",
    "GoogleAuthRequest",
    "TokenResponse",
    # Chat
    "ChatExchangeResponse",
    "ChatMessageCreate",
    "ChatMessageRead",
    "ChatSessionCreate",
    "ChatSessionRead",
    "ChatSessionUpdate",
    "ChatSessionWithMessages",
    # Files
    "FileUploadResponse",
    "UploadedFileRead",
    # Assessment
    "AnswerSubmission",
    "PerformanceAnalysisRead",
    "PerformanceAnalyzeRequest",
    "QuestionGenerateRequest",
    "QuestionGenerateResponse",
    # Content tools
    "SummaryRequest",
    "SummaryResponse",
    "TranslateRequest",
    "TranslateResponse",
    # Subscriptions
    "PlanRead",
    "SubscriptionCreate",
    "SubscriptionResponse",
    # Support
    "SupportTicketCreate",
    "SupportTicketRead",
    "SupportTicketStatusUpdate",
]
