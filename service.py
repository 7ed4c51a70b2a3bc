import asyncio
import functools
import logging
from typing import Awaitable, Callable, List, Optional

from cache import ResultCache
from config import settings
from errors import ConfigError, SearchTimeoutError, UpstreamError
from gemini_client import generate_text
from prompts import get_fallback_prompt, get_primary_prompt
from response_parser import parse_colleges, parse_colleges_lenient
from schemas import College

logger = logging.getLogger(__name__)

TextGenerator = Callable[[str], Awaitable[str]]


class CollegeSearchService:
    """
    Query pipeline: cache check, timed Gemini call, primary/fallback parse, cache write.

    Only ConfigError, SearchTimeoutError and UpstreamError escape fetch().
    """

    def __init__(
        self,
        generate: Optional[TextGenerator] = None,
        api_key: Optional[str] = None,
        cache: Optional[ResultCache] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.generate = generate or functools.partial(generate_text, api_key=self.api_key)
        self.cache = cache if cache is not None else ResultCache(ttl=settings.CACHE_TTL_SECONDS)
        self.timeout = timeout if timeout is not None else settings.SEARCH_TIMEOUT_SECONDS

    async def fetch(self, location: str) -> List[College]:
        """
        Get colleges for a location.

        Args:
            location: State or city name

        Returns:
            Validated list of colleges

        Raises:
            ConfigError: no Gemini API key configured
            SearchTimeoutError: the remote call chain exceeded the timeout
            UpstreamError: primary and fallback prompts both failed
        """
        if not self.api_key:
            raise ConfigError()

        cached = self.cache.get(location)
        if cached is not None:
            logger.info("[CACHE] Returning cached results for: %s", location)
            return cached

        # wait_for cancels the in-flight call on expiry, so a late result never reaches the cache
        try:
            colleges = await asyncio.wait_for(self._search(location), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("[ERROR] Search for %s timed out after %ss", location, self.timeout)
            raise SearchTimeoutError(location, self.timeout) from None

        self.cache.set(location, colleges)
        return colleges

    async def _search(self, location: str) -> List[College]:
        try:
            logger.info("[GEMINI] Primary search for location: %s", location)
            text = await self.generate(get_primary_prompt(location))
            colleges = parse_colleges(text)
            logger.info("[SUCCESS] Returning %d colleges for %s", len(colleges), location)
            return colleges
        except ConfigError:
            raise
        except Exception as e:
            logger.warning("[FALLBACK] Primary search failed for %s: %s", location, e)

        return await self._search_simple(location)

    async def _search_simple(self, location: str) -> List[College]:
        try:
            text = await self.generate(get_fallback_prompt(location))
            colleges = parse_colleges_lenient(text, location)
        except ConfigError:
            raise
        except Exception as e:
            logger.error("[ERROR] Fallback search also failed for %s: %s", location, e)
            raise UpstreamError(location) from e

        logger.info("[SUCCESS] Fallback returned %d colleges for %s", len(colleges), location)
        return colleges
