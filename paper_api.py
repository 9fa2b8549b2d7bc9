"""
Mock Paper API — Main Application
FastAPI application that generates mock exam papers with an LLM and
translates free text.
"""

from dotenv import load_dotenv
load_dotenv()

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from generation.gpt_client import GPT_MODEL
from routers import generation, translation

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s  %(levelname)s  %(message)s",
)
# pypdf is noisy about malformed booklets
logging.getLogger("pypdf").setLevel(logging.ERROR)

log = logging.getLogger(__name__)

PORT = int(os.getenv("PORT", "3000"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: warn when the provider key is missing (requests will fail, serving continues)."""
    if not os.getenv("OPENROUTER_API_KEY"):
        log.warning("OPENROUTER_API_KEY is not set; completion calls will fail until it is.")
    yield


app = FastAPI(
    title="Mock Paper API",
    description="Batched LLM generation of mock exam papers, styled on reference question booklets",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same {"error": ...} shape as every other failure."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request body ({details})"})


# ─── Routers ───────────────────────────────────────────────────────────────────

app.include_router(generation.router)   # /generate-paper
app.include_router(translation.router)  # /translate


@app.get("/health")
async def health_check():
    """Basic health check - API is running"""
    return {
        "status": "healthy",
        "service": "mock-paper-api",
        "model": GPT_MODEL,
        "api_key_configured": bool(os.getenv("OPENROUTER_API_KEY")),
    }


if __name__ == "__main__":
    import uvicorn
    log.info("Server running on port %d", PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
