"""
Step 4 — Prompt Builder

Builds the system + user messages for one batch of MCQ generation.
"""

from types import MappingProxyType
from typing import List, Mapping, Optional

from generation.schemas import Batch

SYSTEM_PROMPT = "You are an exam-paper setter. Output STRICT JSON only."

NO_CORPUS_MARKER = "(no corpus available)"


# ─── Difficulty rubrics ────────────────────────────────────────────────────────

DIFFICULTY_PROMPTS: Mapping[str, str] = MappingProxyType({
    "easy": """\
DIFFICULTY: EASY
- Direct, factual questions
- One-step reasoning only
- Clearly incorrect distractors
- Suitable for beginners""",
    "moderate": """\
DIFFICULTY: MODERATE
- Concept-based questions
- Application of knowledge
- Plausible distractors
- Standard competitive exam level""",
    "hard": """\
DIFFICULTY: HARD
- Multi-step reasoning
- Close distractors (2 options may appear correct)
- Conceptual traps and edge cases
- Previous-year-question style
- Suitable for top-performing candidates""",
})

DEFAULT_DIFFICULTY = "moderate"


# ─── Batch instruction ─────────────────────────────────────────────────────────

PAPER_INSTRUCTIONS = """\
Generate a fresh mock paper for: {exam_name}.
Language of questions: {language}.

{difficulty_rubric}

STRICT RULES:
- Do NOT copy questions verbatim from any source.
- Create NEW questions that match the style, difficulty, and distribution.
- MCQ options must be plausible. One correct answer only.
- Return JSON ONLY in the exact schema.

Schema:
{{
  "durationMinutes": number,
  "questions": [
    {{
      "section": "{section_names}",
      "text": "question text",
      "options": ["A","B","C","D"],
      "answerIndex": 0
    }}
  ]
}}
{exam_guidance}
If you cannot generate all in one go, still output valid JSON.

Batch target size: {batch_size}
Batch section distribution: {distribution}

Style reference corpus (do not copy; only infer style):
{style_corpus}
"""


def difficulty_rubric(
    difficulty: Optional[str],
    rubrics: Mapping[str, str] = DIFFICULTY_PROMPTS,
) -> str:
    """Rubric for difficulty; unknown or missing values fall back to moderate."""
    key = (difficulty or "").strip().lower()
    return rubrics.get(key) or rubrics[DEFAULT_DIFFICULTY]


def build_batch_messages(
    exam_name: str,
    language: str,
    difficulty: Optional[str],
    batch: Batch,
    section_names: List[str],
    style_corpus: str = "",
    exam_guidance: Optional[str] = None,
) -> List[dict]:
    """Return the [system, user] message pair for one batch."""
    user = PAPER_INSTRUCTIONS.format(
        exam_name=exam_name,
        language=language,
        difficulty_rubric=difficulty_rubric(difficulty),
        section_names="|".join(section_names),
        exam_guidance=f"\n{exam_guidance}\n" if exam_guidance else "",
        batch_size=batch.size,
        distribution=batch.describe(),
        style_corpus=style_corpus or NO_CORPUS_MARKER,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]
