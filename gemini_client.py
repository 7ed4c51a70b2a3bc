import logging
from typing import Optional

import google.generativeai as genai

from config import settings
from errors import ConfigError

logger = logging.getLogger(__name__)

def get_gemini_client(api_key: Optional[str] = None):
    """Initialize and return the Gemini model with the search generation settings."""
    key = api_key if api_key is not None else settings.GEMINI_API_KEY
    if not key:
        raise ConfigError()

    genai.configure(api_key=key)
    return genai.GenerativeModel(
        settings.GEMINI_MODEL,
        generation_config={
            "temperature": settings.GEMINI_TEMPERATURE,
            "top_p": settings.GEMINI_TOP_P,
            "top_k": settings.GEMINI_TOP_K,
            "max_output_tokens": settings.GEMINI_MAX_OUTPUT_TOKENS,
        },
    )

async def generate_text(prompt: str, api_key: Optional[str] = None) -> str:
    """
    Send one prompt to Gemini and return the raw response text.

    Args:
        prompt: Natural-language prompt
        api_key: Gemini API key, defaults to settings.GEMINI_API_KEY

    Returns:
        Unprocessed model output (may contain code fences or be truncated)
    """
    model = get_gemini_client(api_key)

    logger.info("[GEMINI] Sending request (%d chars) to %s", len(prompt), settings.GEMINI_MODEL)
    response = await model.generate_content_async(prompt)
    text = response.text
    logger.debug("[GEMINI] Raw response: %s", text[:500])
    return text
