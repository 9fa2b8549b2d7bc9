"""
Generation Router

Endpoints:
  POST /generate-paper — generate a full mock paper in batches

Errors use the uniform {"error": message} body: 400 for a missing examName,
500 for provider failures, unparseable model output, or anything unexpected.
"""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from generation.errors import MissingFieldError, PaperGenerationError
from generation.paper_generator import generate_paper
from generation.schemas import ErrorResponse, GeneratedPaper, GeneratePaperRequest

router = APIRouter(tags=["generation"])

log = logging.getLogger("generation.pipeline")


@router.post(
    "/generate-paper",
    response_model=GeneratedPaper,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_paper_endpoint(request: Optional[GeneratePaperRequest] = None):
    """
    **Generate a mock exam paper.**

    - `examName` is required; known exams (e.g. "TNPSC Group IV") use their real
      duration and section split, anything else gets a generic 60-minute profile
    - `totalQuestions` is clamped into [10, 200]
    - Questions are generated `maxQuestionsPerBatch` at a time
    """
    request = request or GeneratePaperRequest()
    try:
        return await generate_paper(
            exam_name=request.examName,
            language=request.language,
            difficulty=request.difficulty,
            total_questions=request.totalQuestions,
            max_batch_size=request.maxQuestionsPerBatch,
        )
    except MissingFieldError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except PaperGenerationError as e:
        log.error(f"[GENERATE] {request.examName}: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    except Exception as e:
        log.exception(f"[GENERATE] Unexpected error for {request.examName}")
        return JSONResponse(status_code=500, content={"error": str(e)})
