"""
Search session state: the orchestrator between the API and the query pipeline.

Holds the visible results, loading flag, error message and the
speculative cache for one page session. A foreground search consults the
speculative cache first; background pre-fetches only ever write to it.

Concurrency is single event loop, no locks. Overlapping foreground
searches are resolved by a generation counter: only the most recently
issued search may write visible state.
"""

import asyncio
import logging
from typing import List, Optional

from cache import ResultCache
from config import settings
from errors import ConfigError
from schemas import College, SearchStateResponse
from service import CollegeSearchService

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network connection issue. Please check your internet connection and try again."
TIMEOUT_ERROR_MESSAGE = "Search is taking longer than expected. Please try again with a different location."
GENERIC_ERROR_MESSAGE = "Unable to search colleges right now. Please try again in a moment."


def classify_error(error: Exception) -> str:
    """Map a search failure to the message shown to the user."""
    if isinstance(error, ConfigError):
        return str(error)

    message = str(error).lower()
    if "network" in message or "fetch" in message:
        return NETWORK_ERROR_MESSAGE
    if "timeout" in message:
        return TIMEOUT_ERROR_MESSAGE
    return GENERIC_ERROR_MESSAGE


class SearchSession:
    def __init__(
        self,
        service: CollegeSearchService,
        min_loading: Optional[float] = None,
        debounce: Optional[float] = None,
        page_size: Optional[int] = None,
    ):
        self.service = service
        self.min_loading = min_loading if min_loading is not None else settings.MIN_LOADING_SECONDS
        self.debounce = debounce if debounce is not None else settings.PREFETCH_DEBOUNCE_SECONDS
        self.page_size = page_size if page_size is not None else settings.PAGE_SIZE

        self.colleges: List[College] = []
        self.loading = False
        self.error = ""
        self.search_location = ""
        self.display_count = self.page_size
        self.speculative_cache = ResultCache(ttl=None, normalize_keys=False)

        self._generation = 0
        self._selection = 0

    # ============================================
    # Foreground search
    # ============================================

    async def search(self, location: str) -> None:
        self._generation += 1
        generation = self._generation

        self.loading = True
        self.error = ""
        self.search_location = location
        self.display_count = self.page_size

        cached = self.speculative_cache.get(location)
        if cached is not None:
            logger.info("[SEARCH] Using pre-fetched results for %s", location)
            self.colleges = cached
            self.loading = False
            return

        logger.info("[SEARCH] No cached results, searching for colleges in: %s", location)
        self.colleges = []

        try:
            colleges, _ = await asyncio.gather(
                self.service.fetch(location),
                asyncio.sleep(self.min_loading),
            )
        except Exception as e:
            if generation != self._generation:
                logger.info("[SEARCH] Discarding stale failure for %s", location)
                return
            logger.error("[ERROR] Search failed for %s: %s", location, e)
            self.error = classify_error(e)
            self.loading = False
            return

        if colleges:
            self.speculative_cache.set(location, colleges)

        if generation != self._generation:
            logger.info("[SEARCH] Newer search in progress, not showing results for %s", location)
            return

        if colleges:
            self.colleges = colleges
            logger.info("[SEARCH] Loaded %d colleges for %s", len(colleges), location)
        else:
            self.error = f"No colleges found in {location}. Please try a different location or check the spelling."
        self.loading = False

    # ============================================
    # Background pre-fetch
    # ============================================

    async def background_search(self, location: str) -> None:
        """Warm the speculative cache. Never touches visible state and never raises."""
        if location in self.speculative_cache:
            logger.info("[PREFETCH] Using existing cache for %s", location)
            return

        try:
            logger.info("[PREFETCH] Background searching for colleges in: %s", location)
            colleges = await self.service.fetch(location)
        except Exception as e:
            logger.info("[PREFETCH] Background search failed for %s: %s", location, e)
            return

        if colleges:
            self.speculative_cache.set(location, colleges)
            logger.info("[PREFETCH] Cached %d colleges for %s", len(colleges), location)
        else:
            logger.info("[PREFETCH] No results for %s", location)

    async def select_location(self, location: str) -> bool:
        """
        Debounced pre-fetch after the user picks a location.

        Waits the debounce interval; the pre-fetch only runs if no newer
        selection arrived meanwhile and no foreground search is loading.

        Returns:
            True if a background search was started
        """
        self._selection += 1
        selection = self._selection

        await asyncio.sleep(self.debounce)
        if selection != self._selection or self.loading:
            return False

        await self.background_search(location)
        return True

    # ============================================
    # Pagination
    # ============================================

    def load_more(self) -> None:
        self.display_count += self.page_size

    @property
    def visible_colleges(self) -> List[College]:
        return self.colleges[:self.display_count]

    @property
    def has_more(self) -> bool:
        return self.display_count < len(self.colleges)

    def snapshot(self) -> SearchStateResponse:
        return SearchStateResponse(
            location=self.search_location,
            colleges=self.visible_colleges,
            total_count=len(self.colleges),
            display_count=self.display_count,
            has_more=self.has_more,
            loading=self.loading,
            error=self.error,
        )
