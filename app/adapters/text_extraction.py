"""Plain-text extraction for uploaded knowledge-base documents."""

from __future__ import annotations

import asyncio
from io import BytesIO

import pdfplumber

from app.infra.logging_config import get_logger

logger = get_logger("text_extraction")

PDF_MIME_TYPE = "application/pdf"


def _extract_pdf(content: bytes) -> str:
    pages = []
    with pdfplumber.open(BytesIO(content)) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                pages.append(page_text)
    return "\n".join(pages)


def extract_text_sync(content: bytes, content_type: str) -> str:
    """PDFs go through pdfplumber; everything else is decoded as UTF-8."""
    if content_type == PDF_MIME_TYPE:
        return _extract_pdf(content)
    return content.decode("utf-8", errors="replace")


async def extract_text(content: bytes, content_type: str) -> str:
    """Run extraction off the event loop; PDF parsing is CPU-bound."""
    return await asyncio.to_thread(extract_text_sync, content, content_type)
