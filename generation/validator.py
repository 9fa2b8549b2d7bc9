"""
Step 6 — Output Validator

Parses one batch response and repairs shape drift into strict Question objects:
- section / text coerced to strings, text trimmed
- options: first 4 items stringified, placeholders A-D when not a list
- answerIndex: integer clamped into [0, 3], 0 when missing or unparseable
- candidates with empty text or fewer than 4 options are dropped

Only an unparseable response is an error; everything else is repaired or dropped.
"""

import json
import logging
import re
from typing import Any, List

from generation.errors import InvalidModelOutputError
from generation.schemas import Question

log = logging.getLogger("generation.pipeline")

PLACEHOLDER_OPTIONS = ["A", "B", "C", "D"]
OPTION_COUNT = 4
DEFAULT_SECTION = "General"


# ─── JSON extraction ───────────────────────────────────────────────────────────

def parse_model_json(raw: str) -> Any:
    """Parse the model response as one JSON document (markdown fences tolerated)."""
    text = (raw or "").strip()
    text = re.sub(r"^```(?:json)?\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    try:
        return json.loads(text)
    except ValueError as e:
        log.error(f"[STEP 6] Unparseable model output: {e} Raw: {text[:200]}")
        raise InvalidModelOutputError("Model did not return valid JSON.") from e


# ─── Field coercion ────────────────────────────────────────────────────────────

def _option_text(item: Any) -> str:
    if isinstance(item, dict) and "text" in item:
        return str(item["text"])
    return str(item)


def _coerce_options(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return list(PLACEHOLDER_OPTIONS)
    return [_option_text(item) for item in raw[:OPTION_COUNT]]


def _coerce_answer_index(raw: Any) -> int:
    try:
        index = int(raw or 0)
    except (TypeError, ValueError, OverflowError):
        index = 0
    return min(OPTION_COUNT - 1, max(0, index))


def clean_question(candidate: Any) -> Question | None:
    """Repair one raw question dict. Returns None when it cannot be salvaged."""
    if not isinstance(candidate, dict):
        return None
    text = str(candidate.get("text") or "").strip()
    options = _coerce_options(candidate.get("options"))
    if not text or len(options) != OPTION_COUNT:
        return None
    return Question(
        section=str(candidate.get("section") or DEFAULT_SECTION),
        text=text,
        options=options,
        answerIndex=_coerce_answer_index(candidate.get("answerIndex")),
    )


def clean_batch(payload: Any, batch_size: int) -> List[Question]:
    """Extract and clean the questions list, truncated to batch_size."""
    raw_questions = payload.get("questions") if isinstance(payload, dict) else None
    if not isinstance(raw_questions, list):
        raw_questions = []

    cleaned = []
    for candidate in raw_questions:
        question = clean_question(candidate)
        if question is not None:
            cleaned.append(question)

    dropped = len(raw_questions) - len(cleaned)
    if dropped:
        log.warning(f"[STEP 6] Dropped {dropped} malformed question(s)")
    return cleaned[:batch_size]
