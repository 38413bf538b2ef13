from pydantic import BaseModel, Field

from .enums import QualityTier
from .media import MediaItem


class PlaybackResponse(BaseModel):
    """Response model for the /playback endpoint."""

    id: str = Field(..., description="Canonical video id")
    video_url: str = Field(..., description="Selected video-only stream")
    audio_url: str = Field(..., description="Selected audio-only stream")
    quality: QualityTier = Field(..., description="Quality preference the selection was made under")
    player_options: list[str] = Field(default_factory=list, description="Side-loading player options")


class SearchResponse(BaseModel):
    items: list[MediaItem] = Field(default_factory=list)
    page: int = Field(..., ge=1)
    has_more: bool = Field(..., description="False once the listing is exhausted")


class TrendingResponse(BaseModel):
    playlist_id: str
    title: str = ""
    items: list[MediaItem] = Field(default_factory=list)


class Preferences(BaseModel):
    preferred_quality: QualityTier
    caption_filter: bool


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = Field(False)
    error: str = Field(..., description="Error message")
    error_code: str | None = Field(None, description="Machine-readable error code")
