"""
PDF Text Extraction
Downloads a reference PDF and returns whitespace-normalized, truncated plain text.

CONSTRAINTS:
- No LLM, no caching: pure download + parse
- Failures raise DocumentFetchError; callers decide whether to degrade
"""

import io
import logging
import os
import re
from typing import Optional

import httpx
from pypdf import PdfReader

log = logging.getLogger(__name__)

PDF_FETCH_TIMEOUT = float(os.getenv("PDF_FETCH_TIMEOUT", "30"))

DEFAULT_MAX_CHARS = 18000


class DocumentFetchError(RuntimeError):
    """Reference document could not be downloaded or parsed."""


def normalize_pdf_text(text: str) -> str:
    """
    Clean pypdf output:
    - whitespace runs ending in a newline → single newline
    - runs of spaces/tabs → single space
    - leading/trailing whitespace stripped
    """
    if not text:
        return ""
    text = re.sub(r"\s+\n", "\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    return text.strip()


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Extract plain text from a PDF byte stream using pypdf."""
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        texts = []
        for page in reader.pages:
            t = page.extract_text()
            if t:
                texts.append(t)
        return "\n".join(texts)
    except Exception as e:
        raise DocumentFetchError(f"PDF extraction failed: {e}") from e


async def fetch_pdf_text(
    url: str,
    max_chars: int = DEFAULT_MAX_CHARS,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Download the PDF at url and return at most max_chars characters of its text.

    Args:
        url:       Document URL
        max_chars: Truncation limit applied after normalization
        client:    Optional shared httpx client (a short-lived one is created otherwise)

    Raises:
        DocumentFetchError: download failed, non-2xx status, or unparsable PDF
    """
    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=PDF_FETCH_TIMEOUT, follow_redirects=True) as owned:
                response = await owned.get(url)
    except httpx.HTTPError as e:
        raise DocumentFetchError(f"Failed to download PDF: {url} ({e})") from e

    if not response.is_success:
        raise DocumentFetchError(f"Failed to download PDF: {url}")

    text = normalize_pdf_text(extract_pdf_text(response.content))
    log.info("Extracted %d chars from %s", len(text), url)
    return text[:max_chars]
