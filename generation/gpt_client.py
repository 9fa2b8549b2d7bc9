"""
Shared completion helper for the generation pipeline.

Talks to OpenRouter through its OpenAI-compatible Chat Completions API.

Used by:
  - paper_generator.py  (structured JSON mode, one call per batch)
  - translator.py       (free-form text)

Model: openai/gpt-4o-mini  (override with GPT_MODEL env var)
"""

import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from openai import APIError, APIStatusError, AsyncOpenAI

from generation.errors import CompletionError

load_dotenv()

# ── Model config ───────────────────────────────────────────────────────────────
GPT_MODEL = os.getenv("GPT_MODEL", "openai/gpt-4o-mini")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
# Provider failures surface on the first attempt
MAX_RETRIES = 0

Message = Dict[str, str]

# Lazy singleton
_client: AsyncOpenAI | None = None


def _get_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        api_key = os.getenv("OPENROUTER_API_KEY")
        if not api_key:
            raise CompletionError(
                "OPENROUTER_API_KEY is not set. Add it to your .env file."
            )
        _client = AsyncOpenAI(
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            max_retries=MAX_RETRIES,
        )
    return _client


def _provider_detail(error: APIError) -> tuple[str, Any]:
    """Return (message, code) reported by the provider for a failed call."""
    body = error.body if isinstance(error.body, dict) else {}
    message = body.get("message") or error.message or "OpenRouter error"
    code = body.get("code") or error.code
    if code is None:
        code = error.status_code if isinstance(error, APIStatusError) else "connection"
    return message, code


async def _create(
    messages: List[Message],
    model: str,
    temperature: float,
    response_format: Optional[Dict[str, str]] = None,
) -> str:
    client = _get_client()
    kwargs: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }
    if response_format is not None:
        kwargs["response_format"] = response_format
    response = await client.chat.completions.create(**kwargs)
    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


async def call_gpt_text(
    messages: List[Message],
    model: str = GPT_MODEL,
    temperature: float = 0.2,
) -> str:
    """
    Free-form completion. Returns the assistant message text.

    Raises:
        CompletionError: carrying the provider's error message
    """
    try:
        return await _create(messages, model, temperature)
    except APIError as e:
        message, _ = _provider_detail(e)
        raise CompletionError(message) from e


async def call_gpt_json(
    messages: List[Message],
    model: str = GPT_MODEL,
    temperature: float = 0.2,
) -> str:
    """
    Structured completion: the provider is asked to return a single JSON
    object as the whole message content. Returns the raw content string.

    Raises:
        CompletionError: "OpenRouter failed (<code>): <message>"
    """
    try:
        return await _create(messages, model, temperature, {"type": "json_object"})
    except APIError as e:
        message, code = _provider_detail(e)
        raise CompletionError(f"OpenRouter failed ({code}): {message}") from e
