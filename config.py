import logging
import os
from typing import List

logger = logging.getLogger(__name__)


class Settings:
    """Application settings loaded from environment variables."""

    # API Keys
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")

    # Gemini model
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-exp")
    GEMINI_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
    GEMINI_TOP_P: float = float(os.getenv("GEMINI_TOP_P", "0.95"))
    GEMINI_TOP_K: int = int(os.getenv("GEMINI_TOP_K", "40"))
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "8192"))

    # Search
    SEARCH_TIMEOUT_SECONDS: float = float(os.getenv("SEARCH_TIMEOUT_SECONDS", "15"))
    CACHE_TTL_SECONDS: float = float(os.getenv("CACHE_TTL_SECONDS", "300"))
    MIN_LOADING_SECONDS: float = float(os.getenv("MIN_LOADING_SECONDS", "0.3"))
    PREFETCH_DEBOUNCE_SECONDS: float = float(os.getenv("PREFETCH_DEBOUNCE_SECONDS", "0.5"))
    PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "6"))

    # Server
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @classmethod
    def validate(cls):
        """Warn about missing configuration. A missing key only fails at search time."""
        if not cls.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY not set. Searches will fail until it is configured.")

settings = Settings()
