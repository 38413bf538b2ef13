from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import CaptionFormat


class RawVideo(BaseModel):
    """Video metadata as reported by the platform in search and playlist listings."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    title: str = ""
    author: str | None = None
    channel_id: str | None = None
    duration: float | None = Field(None, description="Duration in seconds, None when unknown")
    thumbnail_url: str | None = None


class ListingPage(BaseModel):
    """One page of search or playlist results plus the continuation cursor."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    videos: tuple[RawVideo, ...] = ()
    cursor: Any = Field(None, description="Opaque continuation token, meaningful only to the client")


class Playlist(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    author: str | None = None


class MediaItem(BaseModel):
    """UI-agnostic representation of a playable item."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    media_identifier: str
    media_source_identifier: str
    position: int = 0
    duration: int = 0
    can_delete: bool = True
    can_edit: bool = False
    image_url: str = ""
    author: str = ""
    author_identifier: str = ""


class SubtitleItem(BaseModel):
    language_code: str
    text: str = Field(..., description="Subtitle document")
    label: str = Field(..., description="Display label, e.g. 'YouTube - [en]'")
    format: CaptionFormat = CaptionFormat.VTT


class ResolvedMedia(BaseModel):
    """Video and audio endpoints resolved for one playback request."""

    video_url: str
    audio_url: str

    def player_options(self, start_time: int = 0) -> list[str]:
        """Options for a player that side-loads the audio stream and starts without subtitles."""
        return [
            f"--start-time={start_time}",
            f"--input-slave={self.audio_url}",
            "--sub-track=99999",
        ]
