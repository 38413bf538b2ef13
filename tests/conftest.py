"""Shared fixtures: an in-memory platform client that counts upstream calls."""

import asyncio
from collections import Counter
from collections.abc import AsyncGenerator, Sequence

import pytest

from media_resolver.clients.base import PlatformClient
from media_resolver.config import Settings
from media_resolver.core.preferences import MemoryPreferenceStore
from media_resolver.models.enums import CaptionFormat, QualityTier, SearchFilter
from media_resolver.models.manifest import (
    AudioRendition,
    CaptionManifest,
    CaptionTrack,
    StreamManifest,
    VideoRendition,
)
from media_resolver.models.media import ListingPage, Playlist, RawVideo
from media_resolver.source import MediaSource

VIDEO_ID = "dQw4w9WgXcQ"
TRENDING_ID = "PLuXL6NS58Dyx-wTr5o7NiC7CZRbMA91DC"


def make_video(n: int, duration: float | None = 60.0) -> RawVideo:
    video_id = f"vid{n:08d}"
    return RawVideo(
        id=video_id,
        url=f"https://www.youtube.com/watch?v={video_id}",
        title=f"Video {n}",
        author=f"Author {n}",
        channel_id=f"UC{n}",
        duration=duration,
        thumbnail_url=f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg",
    )


def stream_manifest() -> StreamManifest:
    return StreamManifest(
        video=(
            VideoRendition(codec="vp9", quality=QualityTier.HIGH_1080, url="https://cdn/vp9-1080"),
            VideoRendition(codec="avc1.4d401e", quality=QualityTier.MEDIUM_360, url="https://cdn/avc-360"),
            VideoRendition(codec="avc1.4d401f", quality=QualityTier.HIGH_720, url="https://cdn/avc-720"),
        ),
        audio_only=(
            AudioRendition(codec="mp4a.40.2", bitrate=128_000, url="https://cdn/aac-128"),
            AudioRendition(codec="mp4a.40.2", bitrate=256_000, url="https://cdn/aac-256"),
            AudioRendition(codec="opus", bitrate=320_000, url="https://cdn/opus-320"),
        ),
    )


def caption_manifest() -> CaptionManifest:
    return CaptionManifest(
        tracks=(
            CaptionTrack(language_code="en", url="https://cdn/captions/en"),
            CaptionTrack(language_code="ja", url="https://cdn/captions/ja"),
            CaptionTrack(language_code="en", is_auto_generated=True, url="https://cdn/captions/en-asr"),
        )
    )


class FakeClient(PlatformClient):
    """
    In-memory platform client.

    Search results are served from ``pages`` (a list of video lists per
    term); the cursor of each page is its index. ``delay`` makes every
    lookup yield to the event loop so concurrent callers overlap.
    """

    def __init__(self):
        super().__init__()
        self.calls: Counter[str] = Counter()
        self.delay = 0.01
        self.fail_next: Exception | None = None
        self.streams: dict[str, StreamManifest] = {VIDEO_ID: stream_manifest()}
        self.captions: dict[str, CaptionManifest] = {VIDEO_ID: caption_manifest()}
        self.caption_formats: list[Sequence[CaptionFormat]] = []
        self.pages: dict[str, list[list[RawVideo]]] = {}
        self.filters: list[SearchFilter] = []
        self.playlist_videos: dict[str, list[RawVideo]] = {
            TRENDING_ID: [make_video(1), make_video(2, duration=0), make_video(3)],
        }
        # Raised by get_playlist_videos after every listed video has been yielded
        self.playlist_error: Exception | None = None
        self.playlist_streams_closed = 0
        self.closed = False

    async def _tick(self, name: str):
        self.calls[name] += 1
        await asyncio.sleep(self.delay)
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    async def search_videos(self, term, search_filter):
        await self._tick("search")
        self.filters.append(search_filter)
        pages = self.pages.get(term)
        if not pages:
            return None
        return ListingPage(videos=tuple(pages[0]), cursor=(term, 0))

    async def next_page(self, page):
        await self._tick("next_page")
        term, index = page.cursor
        pages = self.pages[term]
        if index + 1 >= len(pages):
            return None
        return ListingPage(videos=tuple(pages[index + 1]), cursor=(term, index + 1))

    async def get_query_suggestions(self, term):
        await self._tick("suggest")
        return [f"{term} one", f"{term} two"]

    async def get_playlist(self, playlist_id):
        await self._tick("playlist")
        return Playlist(id=playlist_id, title="Trending 20")

    async def get_playlist_videos(self, playlist_id) -> AsyncGenerator[RawVideo, None]:
        self.calls["playlist_videos"] += 1
        try:
            for video in self.playlist_videos.get(playlist_id, []):
                yield video
            if self.playlist_error is not None:
                raise self.playlist_error
        finally:
            self.playlist_streams_closed += 1

    async def get_stream_manifest(self, video_id):
        await self._tick("stream_manifest")
        return self.streams[video_id]

    async def get_caption_manifest(self, video_id, formats):
        await self._tick("caption_manifest")
        self.caption_formats.append(list(formats))
        return self.captions[video_id]

    async def get_track_text(self, track):
        self.calls["track_text"] += 1
        return f"WEBVTT\n\n{track.url}"

    async def close(self):
        self.closed = True


@pytest.fixture()
def settings():
    return Settings(fetch_timeout=1.0, _env_file=None)


@pytest.fixture()
def client():
    return FakeClient()


@pytest.fixture()
def preferences():
    return MemoryPreferenceStore()


@pytest.fixture()
def source(client, preferences, settings):
    return MediaSource(client, preferences, settings)
