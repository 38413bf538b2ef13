"""Per-video memoized stream and caption manifests."""

from ..config import Settings, get_settings
from ..models.enums import CaptionFormat
from ..models.manifest import CaptionManifest, StreamManifest
from .cache import SingleFlightCache


class ManifestCache:
    """
    Fetch-once store of stream and caption manifests keyed by video id.

    Entries are never refreshed once populated. Concurrent lookups for the
    same uncached id share a single upstream fetch.
    """

    def __init__(self, client, settings: Settings | None = None):
        settings = settings or get_settings()
        self._client = client
        self._caption_formats = [CaptionFormat(settings.caption_format)]
        self.streams: SingleFlightCache[str, StreamManifest] = SingleFlightCache(
            "stream manifest",
            timeout=settings.fetch_timeout,
            max_entries=settings.manifest_cache_size,
        )
        self.captions: SingleFlightCache[str, CaptionManifest] = SingleFlightCache(
            "caption manifest",
            timeout=settings.fetch_timeout,
            max_entries=settings.manifest_cache_size,
        )

    @property
    def caption_formats(self) -> list[CaptionFormat]:
        return list(self._caption_formats)

    async def get_stream_manifest(self, video_id: str) -> StreamManifest:
        return await self.streams.get_or_fetch(
            video_id,
            lambda: self._client.get_stream_manifest(video_id),
        )

    async def get_caption_manifest(self, video_id: str) -> CaptionManifest:
        return await self.captions.get_or_fetch(
            video_id,
            lambda: self._client.get_caption_manifest(video_id, formats=self.caption_formats),
        )
