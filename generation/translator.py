"""
Free-text translation passthrough (one completion call).
"""

from generation.gpt_client import call_gpt_text

TRANSLATE_PROMPT = "Translate the following text into {target_language}. Use simple, clear language.\n\n{text}"


async def translate_text(text: str, target_language: str) -> str:
    prompt = TRANSLATE_PROMPT.format(target_language=target_language, text=text)
    return await call_gpt_text(
        [{"role": "user", "content": prompt}],
        temperature=0.2,
    )
