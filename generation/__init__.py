"""
Mock Paper Generation Pipeline
generation/

Steps:
1. Exam Profiles     — free-text exam name → ExamProfile (duration, sections)
2. Style Corpus      — reference PDFs → truncated style text (best effort)
3. Section Planner   — scale sections to target total, flatten, batch
4. Prompts           — per-batch system + user instruction
5. GPT Client        — one structured (JSON mode) completion per batch
6. Validator         — parse + clean model output into Question objects
7. Paper Generator   — sequential batch loop, final GeneratedPaper
"""
