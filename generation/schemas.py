"""
Pydantic schemas for the mock paper generation pipeline.

Layer 1 (static):   SectionCount, ExamProfile       — exam configuration tables
Layer 2 (internal): Batch                           — one unit of LLM work
Layer 3 (output):   Question, GeneratedPaper        — strict paper schema
Layer 4 (API):      GeneratePaperRequest, Translate* — HTTP bodies
"""

from collections import Counter
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ─── Static configuration ──────────────────────────────────────────────────────

class SectionCount(BaseModel):
    """One named section of a paper and how many questions it holds."""
    name: str
    count: int = Field(..., ge=0)


class ExamProfile(BaseModel):
    """Canonical defaults for an exam. key is None for the generic fallback."""
    model_config = ConfigDict(frozen=True)

    key: Optional[str] = None
    duration_minutes: int = Field(..., gt=0)
    total_questions: int = Field(..., gt=0)
    sections: Tuple[SectionCount, ...]

    @property
    def section_total(self) -> int:
        return sum(s.count for s in self.sections)


# ─── Internal pipeline types ───────────────────────────────────────────────────

class Batch(BaseModel):
    """A contiguous slice of the section queue sent as one completion request."""
    sections: List[str]

    @property
    def size(self) -> int:
        return len(self.sections)

    def distribution(self) -> Dict[str, int]:
        """Per-section tally, in first-seen order."""
        return dict(Counter(self.sections))

    def describe(self) -> str:
        return ", ".join(f"{name}: {count}" for name, count in self.distribution().items())


# ─── Generation output types ───────────────────────────────────────────────────

class Question(BaseModel):
    """One cleaned MCQ. Always exactly 4 options and an answer index in [0, 3]."""
    section: str
    text: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    answerIndex: int = Field(..., ge=0, le=3)


class GeneratedPaper(BaseModel):
    """Complete generated paper returned by POST /generate-paper."""
    durationMinutes: int
    questions: List[Question] = Field(default_factory=list)


# ─── API request/response ──────────────────────────────────────────────────────

class GeneratePaperRequest(BaseModel):
    examName: Optional[str] = Field(None, description="Free-text exam name, e.g. 'TNPSC Group IV'")
    language: str = Field("English", description="Language the questions are written in")
    difficulty: str = Field("moderate", description="easy | moderate | hard")
    totalQuestions: Optional[int] = Field(None, description="Override for the exam's default total")
    maxQuestionsPerBatch: Optional[int] = Field(25, ge=0, description="Upper bound on questions per LLM call")


class TranslateRequest(BaseModel):
    text: Optional[str] = None
    targetLanguage: Optional[str] = None


class TranslateResponse(BaseModel):
    translated: str


class ErrorResponse(BaseModel):
    error: str
