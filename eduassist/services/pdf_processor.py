"""PDF text extraction service using PyMuPDF."""

import logging
import re
from dataclasses import dataclass

import pymupdf  # PyMuPDF

logger = logging.getLogger(__name__)

# Control characters that Postgres TEXT/VARCHAR cannot store (NUL, etc.)
_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    page_count: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PDFProcessor:
    """Turns uploaded PDF bytes into plain text for document analysis."""

    @staticmethod
    async def extract_text(pdf_bytes: bytes) -> ExtractionResult:
        """
        Extract the text of every page, pages separated by a blank line.

        Never raises: unreadable files and scanned PDFs without a text layer
        come back with ``error`` set.
        """
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
                pages = [page.get_text() for page in doc]
        except Exception as e:
            logger.warning("Could not open PDF: %s", e)
            return ExtractionResult(text="", page_count=0, error=str(e))

        text = _ILLEGAL_CHARS.sub("", "\n\n".join(pages)).strip()
        if not text:
            return ExtractionResult(text="", page_count=len(pages), error="PDF contains no extractable text")
        return ExtractionResult(text=text, page_count=len(pages))


# Singleton instance
pdf_processor = PDFProcessor()
