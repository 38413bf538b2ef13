from pydantic import BaseModel, ConfigDict, Field

from .enums import CaptionFormat, QualityTier


class VideoRendition(BaseModel):
    """One encoded video-only stream."""

    model_config = ConfigDict(frozen=True)

    codec: str = Field(..., description="Video codec string (avc1.4d401f, vp9, av01...)")
    quality: QualityTier = Field(QualityTier.UNKNOWN, description="Quality tier")
    url: str = Field(..., description="Direct URL to the stream")


class AudioRendition(BaseModel):
    """One encoded audio-only stream."""

    model_config = ConfigDict(frozen=True)

    codec: str = Field(..., description="Audio codec string (mp4a.40.2, opus...)")
    bitrate: int = Field(0, ge=0, description="Bitrate in bits per second")
    url: str = Field(..., description="Direct URL to the stream")


class StreamManifest(BaseModel):
    """Renditions available for one video, in the order the platform reported them."""

    model_config = ConfigDict(frozen=True)

    video: tuple[VideoRendition, ...] = ()
    audio_only: tuple[AudioRendition, ...] = ()


class CaptionTrack(BaseModel):
    model_config = ConfigDict(frozen=True)

    language_code: str = Field(..., description="Language code (e.g. 'en', 'ja')")
    language_name: str | None = Field(None, description="Human-readable language name")
    is_auto_generated: bool = Field(False, description="Whether generated by speech recognition")
    url: str = Field(..., description="URL of the track document")
    format: CaptionFormat = Field(CaptionFormat.VTT, description="Document format")


class CaptionManifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    tracks: tuple[CaptionTrack, ...] = ()
