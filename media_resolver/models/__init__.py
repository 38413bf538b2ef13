from .enums import DEFAULT_QUALITY, CaptionFormat, QualityTier, SearchFilter
from .manifest import (
    AudioRendition,
    CaptionManifest,
    CaptionTrack,
    StreamManifest,
    VideoRendition,
)
from .media import ListingPage, MediaItem, Playlist, RawVideo, ResolvedMedia, SubtitleItem
from .request import PlaybackRequest, PreferencesUpdate, SubtitleRequest
from .response import (
    ErrorResponse,
    PlaybackResponse,
    Preferences,
    SearchResponse,
    TrendingResponse,
)

__all__ = [
    "DEFAULT_QUALITY",
    "AudioRendition",
    "CaptionFormat",
    "CaptionManifest",
    "CaptionTrack",
    "ErrorResponse",
    "ListingPage",
    "MediaItem",
    "PlaybackRequest",
    "PlaybackResponse",
    "Playlist",
    "Preferences",
    "PreferencesUpdate",
    "QualityTier",
    "RawVideo",
    "ResolvedMedia",
    "SearchFilter",
    "SearchResponse",
    "StreamManifest",
    "SubtitleItem",
    "SubtitleRequest",
    "TrendingResponse",
    "VideoRendition",
]
