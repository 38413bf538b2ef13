from pydantic import BaseModel, Field

from .enums import QualityTier


class PlaybackRequest(BaseModel):
    """Request model for the /playback endpoint."""

    id: str = Field(
        ...,
        max_length=2048,
        description="Video id or URL",
        examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"],
    )
    quality: QualityTier | None = Field(
        default=None,
        description="Preferred quality tier ordinal; the stored preference is used when omitted",
    )
    start_time: int = Field(
        default=0,
        ge=0,
        description="Playback start position in seconds",
    )


class SubtitleRequest(BaseModel):
    """Request model for the /subtitles endpoint."""

    id: str = Field(..., max_length=2048, description="Video id or URL")
    language: str = Field(
        ...,
        max_length=16,
        description="Target language code placed first in the result (e.g. 'ja')",
    )


class PreferencesUpdate(BaseModel):
    preferred_quality: QualityTier | None = None
    caption_filter: bool | None = None
