"""
Translation Router

Endpoints:
  POST /translate — translate free text with a single completion call
"""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from generation.schemas import ErrorResponse, TranslateRequest, TranslateResponse
from generation.translator import translate_text

router = APIRouter(tags=["translation"])

log = logging.getLogger(__name__)


@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def translate(request: Optional[TranslateRequest] = None):
    request = request or TranslateRequest()
    if not request.text or not request.targetLanguage:
        return JSONResponse(status_code=400, content={"error": "Missing text or targetLanguage"})
    try:
        translated = await translate_text(request.text, request.targetLanguage)
    except Exception as e:
        log.error(f"Translation failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return TranslateResponse(translated=translated)
