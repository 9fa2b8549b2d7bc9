"""
Step 3 — Section Planner

Deterministic, no LLM:
  scale_sections       — rescale canonical section counts to a target total
  build_section_queue  — one section-name token per requested question
  partition_batches    — bounded slices of the queue, one per LLM call

Scaling keeps proportions with half-up rounding, floors every section at 1,
then corrects rounding drift round-robin from the first section so the total
matches the target exactly.
"""

import logging
import math
from typing import Iterable, List, Sequence

from generation.errors import SectionPlanError
from generation.schemas import Batch, SectionCount

log = logging.getLogger("generation.pipeline")

# Single-section adjustments allowed while correcting drift.
MAX_DRIFT_ROUNDS = 1000

DEFAULT_BATCH_SIZE = 25


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scale_sections(sections: Sequence[SectionCount], target_total: int) -> List[SectionCount]:
    """
    Rescale sections so their counts sum to exactly target_total.

    Earlier sections absorb surplus or deficit first. Every returned count is
    at least 1.

    Raises:
        SectionPlanError: no sections, zero canonical total, or a target that
            cannot be met with one question per section.
    """
    if not sections:
        raise SectionPlanError("Cannot scale an empty section list")
    canonical_total = sum(s.count for s in sections)
    if canonical_total <= 0:
        raise SectionPlanError("Section counts sum to zero")
    if target_total == canonical_total:
        return [SectionCount(name=s.name, count=s.count) for s in sections]
    if target_total < len(sections):
        raise SectionPlanError(
            f"Target of {target_total} questions is below one per section ({len(sections)} sections)"
        )

    ratio = target_total / canonical_total
    adjusted = [
        SectionCount(name=s.name, count=max(1, _round_half_up(s.count * ratio)))
        for s in sections
    ]

    drift = target_total - sum(s.count for s in adjusted)
    i = 0
    while drift != 0 and i < MAX_DRIFT_ROUNDS:
        section = adjusted[i % len(adjusted)]
        if drift > 0:
            section.count += 1
            drift -= 1
        elif section.count > 1:
            section.count -= 1
            drift += 1
        i += 1

    if drift != 0:
        raise SectionPlanError(
            f"Could not fit sections to {target_total} questions (residual drift {drift})"
        )

    log.info(
        f"[STEP 3] Scaled {canonical_total} → {target_total}: "
        + ", ".join(f"{s.name}={s.count}" for s in adjusted)
    )
    return adjusted


def build_section_queue(plan: Iterable[SectionCount]) -> List[str]:
    """Flatten a plan into section-name tokens, sections in plan order."""
    queue: List[str] = []
    for section in plan:
        queue.extend([section.name] * section.count)
    return queue


def partition_batches(queue: Sequence[str], max_batch_size: int = DEFAULT_BATCH_SIZE) -> List[Batch]:
    """Split the queue front-to-back into batches of at most max_batch_size tokens."""
    if max_batch_size < 1:
        raise ValueError(f"max_batch_size must be at least 1, got {max_batch_size}")
    return [
        Batch(sections=list(queue[start:start + max_batch_size]))
        for start in range(0, len(queue), max_batch_size)
    ]
