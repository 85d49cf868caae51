"""Services for external integrations."""

from eduassist.services.s3 import s3_service
from eduassist.services.pdf_processor import pdf_processor
from eduassist.services.ai_gateway import ai_gateway
from eduassist.services.payments import payment_gateway

__all__ = ["s3_service", "pdf_processor", "ai_gateway", "payment_gateway"]
