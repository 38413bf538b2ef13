"""
MediaSource: the long-lived service object behind playback, subtitles,
search and trending browsing.

Construct one per process with a PlatformClient and a PreferenceStore and
pass it to whoever needs it. All caches hang off the instance.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import aclosing
from typing import TypeVar

from .clients.base import PlatformClient
from .config import Settings, get_settings
from .core.cache import SingleFlightCache
from .core.listing import ListingCache, listing_key, playable
from .core.manifests import ManifestCache
from .core.mapper import SOURCE_IDENTIFIER, to_media_item
from .core.preferences import PreferenceStore
from .core.quality import select_audio_rendition, select_video_rendition
from .core.subtitles import select_subtitles
from .core.url_matcher import extract_playlist_id, extract_video_id
from .errors import ResolverError, UpstreamFetchError
from .models.enums import DEFAULT_QUALITY, QualityTier, SearchFilter
from .models.manifest import CaptionTrack
from .models.media import MediaItem, RawVideo, ResolvedMedia, SubtitleItem
from .models.response import TrendingResponse
from .utils.helpers import int_or_none

logger = logging.getLogger(__name__)

T = TypeVar("T")

PREFERRED_QUALITY_KEY = "preferred_quality"
CAPTION_FILTER_KEY = "caption_filter"

# Trending playlists by "<language>-<country>" tag
TRENDING_PLAYLISTS: dict[str, str] = {
    "ja-JP": "PLuXL6NS58Dyx-wTr5o7NiC7CZRbMA91DC",
}


class MediaSource:
    """Resolves videos into playable endpoints and browses listings, caching upstream lookups."""

    unique_key = SOURCE_IDENTIFIER

    def __init__(
        self,
        client: PlatformClient,
        preferences: PreferenceStore,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.client = client
        self.preferences = preferences
        self.manifests = ManifestCache(client, self.settings)
        self.listings = ListingCache(self.settings)
        self._videos: SingleFlightCache[str, RawVideo] = SingleFlightCache(
            "video",
            max_entries=self.settings.listing_cache_size,
        )

    @property
    def source_name(self) -> str:
        return self.settings.source_name

    async def aclose(self):
        await self.client.close()

    async def _bounded(self, awaitable: Awaitable[T], what: str) -> T:
        """Await an uncached upstream call under the fetch timeout."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.settings.fetch_timeout)
        except asyncio.TimeoutError:
            raise UpstreamFetchError(
                f"{what} timed out after {self.settings.fetch_timeout}s",
                error_code="upstream.timeout",
            )
        except ResolverError:
            raise
        except StopAsyncIteration:
            raise
        except Exception as e:
            logger.exception("%s failed: %s", what, e)
            raise UpstreamFetchError(f"{what} failed: {e!s}") from e

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    @property
    def preferred_quality(self) -> QualityTier:
        stored = int_or_none(self.preferences.get(PREFERRED_QUALITY_KEY, DEFAULT_QUALITY.value))
        try:
            return QualityTier(stored)
        except ValueError:
            logger.warning("Ignoring invalid stored quality %r", stored)
            return DEFAULT_QUALITY

    def set_preferred_quality(self, quality: QualityTier):
        self.preferences.set(PREFERRED_QUALITY_KEY, int(quality))

    @property
    def caption_filter_on(self) -> bool:
        return bool(self.preferences.get(CAPTION_FILTER_KEY, False))

    def set_caption_filter(self, enabled: bool):
        self.preferences.set(CAPTION_FILTER_KEY, bool(enabled))

    def toggle_caption_filter(self) -> bool:
        enabled = not self.caption_filter_on
        self.set_caption_filter(enabled)
        return enabled

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    async def resolve_playback(
        self,
        raw_id: str,
        preferred_quality: QualityTier | None = None,
    ) -> ResolvedMedia:
        """Pick the video and audio streams for *raw_id* under the quality preference."""
        video_id = extract_video_id(raw_id)
        manifest = await self.manifests.get_stream_manifest(video_id)

        quality = self.preferred_quality if preferred_quality is None else QualityTier(preferred_quality)
        video_url = select_video_rendition(manifest, quality, self.settings.video_codec)
        audio_url = select_audio_rendition(manifest, self.settings.audio_codec)
        return ResolvedMedia(video_url=video_url, audio_url=audio_url)

    async def resolve_subtitles(self, raw_id: str, target_language: str | None) -> list[SubtitleItem]:
        """Human-authored subtitles for *raw_id*, one per language, target language first."""
        video_id = extract_video_id(raw_id)
        manifest = await self.manifests.get_caption_manifest(video_id)
        return await select_subtitles(
            manifest,
            target_language,
            self._fetch_track_text,
            source_name=self.source_name,
        )

    async def _fetch_track_text(self, track: CaptionTrack) -> str:
        return await self._bounded(
            self.client.get_track_text(track),
            f"{track.language_code} caption download",
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(
        self,
        term: str,
        page: int,
        caption_filter: bool | None = None,
    ) -> list[MediaItem] | None:
        """
        Page *page* of search results as media items.

        Returns None once the listing is exhausted; callers stop paginating
        at that point.
        """
        term = term.strip()
        if caption_filter is None:
            caption_filter = self.caption_filter_on
        search_filter = SearchFilter.SUBTITLES if caption_filter else SearchFilter.VIDEO

        result = await self.listings.get_page(
            listing_key(term, caption_filter),
            page,
            first_page=lambda: self.client.search_videos(term, search_filter),
            next_page=self.client.next_page,
        )
        if result is None:
            return None

        items = []
        for video in playable(result.videos):
            self._videos.put(video.url, video)
            items.append(to_media_item(video, self.unique_key))
        return items

    def get_cached_video(self, url: str) -> RawVideo | None:
        """Metadata of a video previously returned by search, if still cached."""
        return self._videos.get(url)

    async def suggest(self, term: str) -> list[str]:
        if not term.strip():
            return []
        return await self._bounded(self.client.get_query_suggestions(term), "Query suggestions")

    # ------------------------------------------------------------------
    # Trending
    # ------------------------------------------------------------------

    @staticmethod
    def trending_playlist_id(language_tag: str) -> str | None:
        return TRENDING_PLAYLISTS.get(language_tag)

    async def list_trending_playlist(self, playlist_id: str) -> AsyncIterator[MediaItem]:
        """Stream the playable videos of a playlist as media items."""
        playlist_id = extract_playlist_id(playlist_id)
        async with aclosing(self.client.get_playlist_videos(playlist_id)) as videos:
            iterator = videos.__aiter__()
            while True:
                try:
                    video = await self._bounded(iterator.__anext__(), f"Playlist {playlist_id} listing")
                except StopAsyncIteration:
                    return
                if not video.duration:
                    continue
                yield to_media_item(video, self.unique_key)

    async def trending_page(self, language_tag: str) -> TrendingResponse | None:
        """
        Title and items of the trending playlist for *language_tag*.

        A listing failure part way through keeps the items collected so far,
        so the result list stays usable. None if no playlist is known for the
        tag.
        """
        playlist_id = self.trending_playlist_id(language_tag)
        if playlist_id is None:
            return None

        playlist = await self._bounded(self.client.get_playlist(playlist_id), f"Playlist {playlist_id}")
        items: list[MediaItem] = []
        try:
            async for item in self.list_trending_playlist(playlist_id):
                items.append(item)
        except UpstreamFetchError as e:
            logger.warning("Trending listing %s stopped after %d items: %s", playlist_id, len(items), e)

        return TrendingResponse(playlist_id=playlist_id, title=playlist.title, items=items)

    @staticmethod
    def display_subtitle(item: MediaItem) -> str:
        return item.author or ""

    def stats(self) -> dict[str, int | None]:
        return {
            "stream_manifests": len(self.manifests.streams),
            "caption_manifests": len(self.manifests.captions),
            "listing_pages": len(self.listings),
            "videos": len(self._videos),
            "manifest_cache_size": self.settings.manifest_cache_size,
            "listing_cache_size": self.settings.listing_cache_size,
        }
