"""Core resolution logic: identifiers, caches, rendition and subtitle selection."""

from .cache import SingleFlightCache
from .listing import ListingCache, listing_key, playable
from .manifests import ManifestCache
from .mapper import to_media_item
from .quality import QualityLadder, select_audio_rendition, select_video_rendition
from .subtitles import select_subtitles
from .url_matcher import extract_playlist_id, extract_video_id, match_identifier

__all__ = [
    "ListingCache",
    "ManifestCache",
    "QualityLadder",
    "SingleFlightCache",
    "extract_playlist_id",
    "extract_video_id",
    "listing_key",
    "match_identifier",
    "playable",
    "select_audio_rendition",
    "select_subtitles",
    "select_video_rendition",
    "to_media_item",
]
