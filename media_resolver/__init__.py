"""Media Resolver package."""

from .config import get_settings
from .errors import (
    InvalidIdentifier,
    NoCompatibleRendition,
    PageOutOfOrder,
    ResolverError,
    UpstreamFetchError,
)
from .source import MediaSource

__all__ = [
    "InvalidIdentifier",
    "MediaSource",
    "NoCompatibleRendition",
    "PageOutOfOrder",
    "ResolverError",
    "UpstreamFetchError",
    "get_settings",
]
