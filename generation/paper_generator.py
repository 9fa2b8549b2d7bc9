"""
Step 7 — Paper Generator

Orchestrates one mock paper:
  1. Resolve exam profile, clamp the target total into [10, 200]
  2. Build the style corpus from reference PDFs (best effort)
  3. Scale the section plan to the target total
  4. Flatten into a section queue and partition into batches
  5. For each batch, in queue order: prompt → structured completion → clean
  6. Return the first target_total cleaned questions

Batches run sequentially so assembled order follows queue order. Any batch
failure (provider error or unparseable JSON) aborts the whole request and
discards earlier batches.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from generation.errors import MissingFieldError
from generation.exam_profiles import EXAM_GUIDANCE, resolve_exam_profile
from generation.gpt_client import call_gpt_json
from generation.prompts import build_batch_messages
from generation.schemas import GeneratedPaper, Question
from generation.section_planner import (
    DEFAULT_BATCH_SIZE,
    build_section_queue,
    partition_batches,
    scale_sections,
)
from generation.style_corpus import FetchText, build_style_corpus
from generation.validator import clean_batch, parse_model_json

log = logging.getLogger("generation.pipeline")

MIN_QUESTIONS = 10
MAX_QUESTIONS = 200
GENERATION_TEMPERATURE = 0.3

Complete = Callable[..., Awaitable[str]]


def clamp_total(requested: Optional[int], default: int) -> int:
    """Requested total (or default when falsy) clamped into [MIN_QUESTIONS, MAX_QUESTIONS]."""
    return min(max(MIN_QUESTIONS, requested or default), MAX_QUESTIONS)


async def generate_paper(
    exam_name: Optional[str],
    language: str = "English",
    difficulty: str = "moderate",
    total_questions: Optional[int] = None,
    max_batch_size: Optional[int] = DEFAULT_BATCH_SIZE,
    *,
    complete: Optional[Complete] = None,
    fetch_text: Optional[FetchText] = None,
) -> GeneratedPaper:
    """
    Generate a mock paper for exam_name.

    Args:
        exam_name:       Free-text exam name (required)
        language:        Language the questions are written in
        difficulty:      easy | moderate | hard (anything else → moderate)
        total_questions: Optional override of the profile's total
        max_batch_size:  Questions per completion call (falsy → 25)
        complete:        Structured completion callable (defaults to call_gpt_json)
        fetch_text:      Document text fetcher (defaults to fetch_pdf_text)

    Raises:
        MissingFieldError:       exam_name absent
        CompletionError:         provider failure on any batch
        InvalidModelOutputError: unparseable model output on any batch
    """
    if not exam_name:
        raise MissingFieldError("Missing examName")

    complete = complete or call_gpt_json

    profile = resolve_exam_profile(exam_name)
    target_total = clamp_total(total_questions, profile.total_questions)
    log.info(f"[STEP 1] {exam_name}: target {target_total} questions, {profile.duration_minutes} min")

    style_corpus = await build_style_corpus(profile.key, fetch_text=fetch_text)

    plan = scale_sections(profile.sections, target_total)
    queue = build_section_queue(plan)
    batches = partition_batches(queue, max_batch_size or DEFAULT_BATCH_SIZE)
    log.info(f"[STEP 3] {len(queue)} questions in {len(batches)} batch(es)")

    section_names = [s.name for s in profile.sections]
    guidance = EXAM_GUIDANCE.get(profile.key) if profile.key else None

    questions: List[Question] = []
    for n, batch in enumerate(batches, start=1):
        messages = build_batch_messages(
            exam_name=exam_name,
            language=language,
            difficulty=difficulty,
            batch=batch,
            section_names=section_names,
            style_corpus=style_corpus,
            exam_guidance=guidance,
        )
        log.info(f"[STEP 5] Batch {n}/{len(batches)}: {batch.describe()}")
        raw = await complete(messages=messages, temperature=GENERATION_TEMPERATURE)

        cleaned = clean_batch(parse_model_json(raw), batch.size)
        log.info(f"[STEP 6] Batch {n}/{len(batches)}: kept {len(cleaned)}/{batch.size}")
        questions.extend(cleaned)

    if len(questions) < target_total:
        log.warning(f"[STEP 7] Under-delivered: {len(questions)}/{target_total} questions")

    return GeneratedPaper(
        durationMinutes=profile.duration_minutes,
        questions=questions[:target_total],
    )
