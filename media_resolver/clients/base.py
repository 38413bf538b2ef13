"""
Contract for the video-platform client the resolver sits in front of.

A client knows how to talk to the platform (search, continuation, manifests,
playlists). The resolver only ever calls the methods below and caches their
results; it never inspects cursors or raw responses.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator, Sequence

from ..core.http_client import HTTPClient
from ..models.enums import CaptionFormat, SearchFilter
from ..models.manifest import CaptionManifest, CaptionTrack, StreamManifest
from ..models.media import ListingPage, Playlist, RawVideo

logger = logging.getLogger(__name__)


class PlatformClient(ABC):
    """
    Abstract base class for platform clients.

    Subclasses must implement every abstract lookup. get_track_text() has a
    default implementation that downloads the track URL with the shared
    retrying HTTP client.
    """

    def __init__(self, http: HTTPClient | None = None):
        self._http = http

    @property
    def http(self) -> HTTPClient:
        """Lazy-initialized HTTP client."""
        if self._http is None:
            self._http = HTTPClient()
        return self._http

    async def close(self):
        """Clean up HTTP client."""
        if self._http:
            await self._http.close()
            self._http = None

    # === Listings ===

    @abstractmethod
    async def search_videos(self, term: str, search_filter: SearchFilter) -> ListingPage | None:
        """First page of search results, or None if there are none."""
        ...

    @abstractmethod
    async def next_page(self, page: ListingPage) -> ListingPage | None:
        """Page following *page* (via its cursor), or None at the end of the listing."""
        ...

    @abstractmethod
    async def get_query_suggestions(self, term: str) -> list[str]: ...

    @abstractmethod
    async def get_playlist(self, playlist_id: str) -> Playlist: ...

    @abstractmethod
    def get_playlist_videos(self, playlist_id: str) -> AsyncGenerator[RawVideo, None]:
        """Stream every video in the playlist. Implement as an async generator; callers aclose() it."""
        ...

    # === Manifests ===

    @abstractmethod
    async def get_stream_manifest(self, video_id: str) -> StreamManifest: ...

    @abstractmethod
    async def get_caption_manifest(
        self,
        video_id: str,
        formats: Sequence[CaptionFormat],
    ) -> CaptionManifest:
        """Caption tracks for the video, restricted to *formats*."""
        ...

    async def get_track_text(self, track: CaptionTrack) -> str:
        """Download the subtitle document for *track*."""
        logger.debug("Fetching %s captions from %s", track.language_code, track.url)
        return await self.http.get_text(track.url)
