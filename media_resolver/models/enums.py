from enum import Enum, IntEnum


class QualityTier(IntEnum):
    """Discrete video quality levels, compared by ordinal position."""

    UNKNOWN = 0
    LOW_144 = 1
    LOW_240 = 2
    MEDIUM_360 = 3
    MEDIUM_480 = 4
    HIGH_720 = 5
    HIGH_960 = 6
    HIGH_1080 = 7
    HIGH_1440 = 8
    HIGH_2160 = 9
    HIGH_2880 = 10
    HIGH_3072 = 11
    HIGH_4320 = 12

    @property
    def height(self) -> int:
        return _TIER_HEIGHTS[self]

    @classmethod
    def from_height(cls, height: int | None) -> "QualityTier":
        """Map a pixel height (e.g. 1080) to its tier, UNKNOWN if unlisted."""
        for tier, tier_height in _TIER_HEIGHTS.items():
            if tier_height and tier_height == height:
                return tier
        return cls.UNKNOWN


_TIER_HEIGHTS = {
    QualityTier.UNKNOWN: 0,
    QualityTier.LOW_144: 144,
    QualityTier.LOW_240: 240,
    QualityTier.MEDIUM_360: 360,
    QualityTier.MEDIUM_480: 480,
    QualityTier.HIGH_720: 720,
    QualityTier.HIGH_960: 960,
    QualityTier.HIGH_1080: 1080,
    QualityTier.HIGH_1440: 1440,
    QualityTier.HIGH_2160: 2160,
    QualityTier.HIGH_2880: 2880,
    QualityTier.HIGH_3072: 3072,
    QualityTier.HIGH_4320: 4320,
}

DEFAULT_QUALITY = QualityTier.MEDIUM_480


class SearchFilter(str, Enum):
    VIDEO = "video"
    SUBTITLES = "subtitles"


class CaptionFormat(str, Enum):
    VTT = "vtt"
    SRV1 = "srv1"
    SRV2 = "srv2"
    SRV3 = "srv3"
    TTML = "ttml"
