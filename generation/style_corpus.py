"""
Step 2 — Style Corpus

Pulls text from an exam's reference question booklets so the model can match
tone and difficulty. Best effort: a document that fails to download or parse
contributes nothing and the request carries on.
"""

import logging
from typing import Awaitable, Callable, Mapping, Optional, Sequence

from generation.exam_profiles import REFERENCE_SOURCES
from ingestion.pdf_text import fetch_pdf_text

log = logging.getLogger("generation.pipeline")

MAX_SOURCES = 3
PER_DOCUMENT_CHARS = 14000
CORPUS_CHARS = 35000
CORPUS_SEPARATOR = "\n\n---\n\n"

FetchText = Callable[[str, int], Awaitable[str]]


async def build_style_corpus(
    exam_key: Optional[str],
    sources: Mapping[str, Sequence[str]] = REFERENCE_SOURCES,
    fetch_text: Optional[FetchText] = None,
) -> str:
    """
    Return the joined, truncated reference text for exam_key ("" if none).

    Documents are fetched one at a time, in configured order.
    """
    if not exam_key or not sources.get(exam_key):
        return ""

    fetch = fetch_text or fetch_pdf_text
    urls = list(sources[exam_key])[:MAX_SOURCES]

    texts = []
    for url in urls:
        try:
            texts.append(await fetch(url, PER_DOCUMENT_CHARS))
        except Exception as e:
            # Non-blocking: any failure leaves this document empty
            log.warning(f"[STEP 2] Skipping reference document {url}: {e}")
            texts.append("")

    corpus = CORPUS_SEPARATOR.join(t for t in texts if t)[:CORPUS_CHARS]
    log.info(f"[STEP 2] Style corpus for {exam_key}: {len(corpus)} chars from {sum(1 for t in texts if t)}/{len(urls)} documents")
    return corpus
