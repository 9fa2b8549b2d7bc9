"""
Ingestion Package

Reference-document intake for style extraction:
1. Download (httpx) → PDF bytes
2. Parse (pypdf) → raw page text
3. Normalize → whitespace-collapsed, truncated text

Failures raise DocumentFetchError so callers can degrade per document.
"""

from .pdf_text import (
    DocumentFetchError,
    extract_pdf_text,
    fetch_pdf_text,
    normalize_pdf_text,
)

__all__ = [
    "DocumentFetchError",
    "extract_pdf_text",
    "fetch_pdf_text",
    "normalize_pdf_text",
]
