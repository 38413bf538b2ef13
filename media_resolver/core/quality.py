"""
Rendition selection for playback.

Video: the user's preferred tier is a ceiling, not a requirement. Only
renditions in the compatible codec family are considered; when the exact
tier is missing the next lower present tier wins. If no compatible tier is
present at or below the preference the first raw manifest entry is used,
whatever its codec.

Audio: highest-bitrate rendition in the compatible codec family. There is no
degrade path; a manifest without one is a hard failure.
"""

import logging
from collections.abc import Iterable

from ..config import get_settings
from ..errors import NoCompatibleRendition
from ..models.enums import QualityTier
from ..models.manifest import AudioRendition, StreamManifest, VideoRendition

logger = logging.getLogger(__name__)


class QualityLadder:
    """Ordered quality scale with an exact-else-next-lower lookup."""

    def __init__(self, tiers: Iterable[QualityTier] = QualityTier):
        self.tiers: tuple[QualityTier, ...] = tuple(sorted(set(tiers)))

    def below(self, tier: QualityTier) -> list[QualityTier]:
        """Tiers strictly below *tier*, nearest first."""
        return [t for t in reversed(self.tiers) if t < tier]

    def find_at_or_below(
        self,
        available: Iterable[QualityTier],
        preferred: QualityTier,
    ) -> QualityTier | None:
        """
        Return *preferred* if available, else the nearest available tier
        below it, else None.
        """
        present = set(available)
        if preferred in present:
            return preferred
        for tier in self.below(preferred):
            if tier in present:
                return tier
        return None


DEFAULT_LADDER = QualityLadder()


def _codec_matches(codec: str, family: str) -> bool:
    return family.lower() in (codec or "").lower()


def compatible_video(
    manifest: StreamManifest,
    codec_family: str | None = None,
) -> list[VideoRendition]:
    family = codec_family or get_settings().video_codec
    return [r for r in manifest.video if _codec_matches(r.codec, family)]


def available_qualities(
    manifest: StreamManifest,
    codec_family: str | None = None,
) -> list[QualityTier]:
    """Distinct tiers among compatible renditions, ascending."""
    return sorted({r.quality for r in compatible_video(manifest, codec_family)})


def select_video_rendition(
    manifest: StreamManifest,
    preferred_quality: QualityTier,
    codec_family: str | None = None,
    ladder: QualityLadder = DEFAULT_LADDER,
) -> str:
    """Return the URL of the video rendition to play under *preferred_quality*."""
    compatible = compatible_video(manifest, codec_family)
    tier = ladder.find_at_or_below({r.quality for r in compatible}, preferred_quality)

    if tier is None:
        if not manifest.video:
            raise NoCompatibleRendition(
                "Manifest has no video renditions",
                error_code="rendition.no_video",
            )
        fallback = manifest.video[0]
        logger.warning(
            "No compatible rendition at or below %s; using first manifest entry (%s)",
            preferred_quality.name,
            fallback.codec,
        )
        return fallback.url

    if tier != preferred_quality:
        logger.info("Preferred quality %s unavailable, degraded to %s", preferred_quality.name, tier.name)

    return next(r.url for r in compatible if r.quality == tier)


def select_audio_rendition(
    manifest: StreamManifest,
    codec_family: str | None = None,
) -> str:
    """Return the URL of the highest-bitrate compatible audio rendition."""
    family = codec_family or get_settings().audio_codec
    candidates: list[AudioRendition] = sorted(
        (r for r in manifest.audio_only if _codec_matches(r.codec, family)),
        key=lambda r: r.bitrate,
    )
    if not candidates:
        raise NoCompatibleRendition(
            f"No audio rendition with codec {family!r}",
            error_code="rendition.no_audio",
        )
    return candidates[-1].url
