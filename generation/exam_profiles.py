"""
Step 1 — Exam Profile Resolver

Maps a free-text exam name to a known exam key and its canonical ExamProfile
(duration, total questions, section breakdown). Deterministic, no LLM.

Detection is an ordered list of (required substrings → exam key) rules. A rule
matches when every substring occurs in the lower-cased name, in any order.
Unknown exams resolve to FALLBACK_PROFILE; that is a routing decision, not an error.

All tables here are read-only after import. Every public function accepts
substitute tables as keyword arguments.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from generation.schemas import ExamProfile, SectionCount

log = logging.getLogger("generation.pipeline")


TNPSC_GROUP_IV = "TNPSC_GROUP_IV"

DetectionRule = Tuple[frozenset, str]


# ─── Detection rules (evaluated in order) ──────────────────────────────────────

DETECTION_RULES: Tuple[DetectionRule, ...] = (
    (frozenset({"tnpsc", "group iv"}),      TNPSC_GROUP_IV),
    (frozenset({"tnpsc", "group 4"}),       TNPSC_GROUP_IV),
    (frozenset({"tamil nadu", "group iv"}), TNPSC_GROUP_IV),
)


# ─── Canonical profiles ────────────────────────────────────────────────────────

EXAM_PROFILES: Mapping[str, ExamProfile] = MappingProxyType({
    TNPSC_GROUP_IV: ExamProfile(
        key=TNPSC_GROUP_IV,
        duration_minutes=180,
        total_questions=200,
        sections=(
            SectionCount(name="Language", count=100),
            SectionCount(name="General Studies", count=75),
            SectionCount(name="Aptitude", count=25),
        ),
    ),
})

FALLBACK_PROFILE = ExamProfile(
    key=None,
    duration_minutes=60,
    total_questions=50,
    sections=(
        SectionCount(name="General", count=20),
        SectionCount(name="Quant", count=15),
        SectionCount(name="Reasoning", count=15),
    ),
)


# ─── Reference question booklets (style extraction only) ───────────────────────
# Newest first; the corpus builder only reads the first few.

REFERENCE_SOURCES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    TNPSC_GROUP_IV: (
        # 2025
        "https://tnpsc.gov.in/Tentative/Document/07_2025_GENEARAL_ENGLISH_GS.pdf",
        "https://tnpsc.gov.in/Tentative/Document/07_2025_GENEAL_TAMIL_GS.pdf",
        # 2024
        "https://tnpsc.gov.in/Tentative/Document/01_2024_GR_IV_GENERAL_ENGLISH.pdf",
        "https://tnpsc.gov.in/Tentative/Document/01_2024_GR_IV_GENERAL_TAMIL.pdf",
        # 2022
        "https://tnpsc.gov.in/Tentative/Document/CCS4T_2022_OPT.pdf",
    ),
})


# ─── Exam-specific prompt guidance ─────────────────────────────────────────────

EXAM_GUIDANCE: Mapping[str, str] = MappingProxyType({
    TNPSC_GROUP_IV: """\
This exam is TNPSC Group IV:
- Total questions target: 200
- Sections: 100 Language, 75 General Studies, 25 Aptitude
- Level: SSLC/10th standard
- Keep questions exam-like and practical.""",
})


# ─── Resolution ────────────────────────────────────────────────────────────────

def detect_exam_key(
    exam_name: Optional[str],
    rules: Sequence[DetectionRule] = DETECTION_RULES,
) -> Optional[str]:
    """Return the key of the first rule whose substrings all occur in exam_name."""
    name = (exam_name or "").lower()
    if not name:
        return None
    for required, key in rules:
        if all(token in name for token in required):
            return key
    return None


def resolve_exam_profile(
    exam_name: Optional[str],
    rules: Sequence[DetectionRule] = DETECTION_RULES,
    profiles: Mapping[str, ExamProfile] = EXAM_PROFILES,
    fallback: ExamProfile = FALLBACK_PROFILE,
) -> ExamProfile:
    """
    Step 1: Resolve exam_name → ExamProfile.

    Never raises. A detected key with no configured profile also falls back.
    """
    key = detect_exam_key(exam_name, rules)
    profile = profiles.get(key) if key else None
    if profile is None:
        log.info(f"[STEP 1] No known exam for '{exam_name}', using fallback profile")
        return fallback
    log.info(f"[STEP 1] '{exam_name}' → {key} ({profile.total_questions} questions, {profile.duration_minutes} min)")
    return profile
