"""
Page-keyed cache for search and playlist listings.

Pages for one listing key form a chain: page 1 is fetched directly, page N
is always fetched from page N-1's cursor. An upstream ``None`` marks the end
of the listing; it is cached like a page so exhausted keys are never
re-fetched.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable

from ..config import Settings, get_settings
from ..errors import PageOutOfOrder
from ..models.media import ListingPage, RawVideo
from .cache import SingleFlightCache

logger = logging.getLogger(__name__)

CAPTION_FILTER_SUFFIX = " [filter:cc]"


def listing_key(term: str, caption_filter: bool = False) -> str:
    """Cache key for a search term, distinct for filtered and unfiltered results."""
    key = term.strip()
    if caption_filter:
        key = f"{key}{CAPTION_FILTER_SUFFIX}"
    return key


def playable(videos: Iterable[RawVideo]) -> list[RawVideo]:
    """Drop entries without a positive duration."""
    return [v for v in videos if v.duration]


class ListingCache:
    """Cache of listing pages keyed by (listing key, page number)."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.pages: SingleFlightCache[tuple[str, int], ListingPage | None] = SingleFlightCache(
            "listing page",
            timeout=settings.fetch_timeout,
            max_entries=settings.listing_cache_size,
        )

    def __len__(self) -> int:
        return len(self.pages)

    async def get_page(
        self,
        key: str,
        page: int,
        first_page: Callable[[], Awaitable[ListingPage | None]],
        next_page: Callable[[ListingPage], Awaitable[ListingPage | None]],
    ) -> ListingPage | None:
        """
        Return page *page* for *key*, or None past the end of the listing.

        Page 1 is loaded with *first_page*. Page N > 1 is loaded by calling
        *next_page* on cached page N-1 and raises PageOutOfOrder if page N-1
        has not been loaded.
        """
        if page < 1:
            raise ValueError(f"Page numbers start at 1, got {page}")

        if page == 1:
            return await self.pages.get_or_fetch((key, 1), first_page)

        previous_key = (key, page - 1)
        if previous_key not in self.pages:
            raise PageOutOfOrder(
                f"Page {page} of {key!r} requested before page {page - 1} was loaded"
            )

        previous = self.pages.get(previous_key)
        if previous is None:
            logger.debug("Listing %r exhausted before page %d", key, page)
            return None

        return await self.pages.get_or_fetch((key, page), lambda: next_page(previous))
