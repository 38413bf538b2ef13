"""Conversion of platform video metadata into media items."""

from ..models.media import MediaItem, RawVideo
from ..utils.helpers import float_or_none, str_or_none, url_or_none

SOURCE_IDENTIFIER = "player_youtube"


def to_media_item(video: RawVideo, source_identifier: str = SOURCE_IDENTIFIER) -> MediaItem:
    """Map one RawVideo to a MediaItem. Missing optional fields become "" or 0."""
    duration = float_or_none(video.duration) or 0.0
    return MediaItem(
        title=video.title or "",
        media_identifier=video.url,
        media_source_identifier=source_identifier,
        position=0,
        duration=int(duration),
        can_delete=True,
        can_edit=False,
        image_url=url_or_none(video.thumbnail_url) or "",
        author=str_or_none(video.author) or "",
        author_identifier=str_or_none(video.channel_id) or "",
    )
