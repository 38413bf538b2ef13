"""
Identifier normalizer: turns a raw URL or bare id into a canonical video or
playlist id.

Each id kind defines a set of URL patterns with a named ``id`` group. The
matcher normalizes URLs, resolves domain aliases (short links, mobile and
music hosts) and matches against the registered patterns. Matching is purely
syntactic; nothing here touches the network.
"""

import logging
import re
from enum import Enum
from urllib.parse import urlparse, urlunparse

from ..errors import InvalidIdentifier

logger = logging.getLogger(__name__)

_VIDEO_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_PLAYLIST_ID_RE = re.compile(r"^(?:PL|UU|LL|FL|RD|OL)[a-zA-Z0-9_-]{10,}$")

# Hosts left after alias resolution in normalize_url()
_YOUTUBE_HOST = r"(?:www\.)?youtube\.com"
# An id ends at the end of the URL or at a query, fragment or path delimiter
_ID_END = r"(?=$|[&#?/])"

WATCH_URL = "https://www.youtube.com/watch?v={id}"
PLAYLIST_URL = "https://www.youtube.com/playlist?list={id}"


class IdKind(str, Enum):
    VIDEO = "video"
    PLAYLIST = "playlist"


class URLPattern:
    """A URL pattern for extracting one kind of identifier."""

    def __init__(
        self,
        kind: IdKind,
        pattern: str,
        id_group: str = "id",
        domain_pattern: str | None = _YOUTUBE_HOST,
    ):
        self.kind = kind
        self.pattern = re.compile(pattern, re.IGNORECASE)
        self.id_group = id_group
        self.domain_pattern = re.compile(domain_pattern, re.IGNORECASE) if domain_pattern else None

    def match(self, url: str, hostname: str) -> str | None:
        """Return the id captured from *url*, or None if the host or shape does not match."""
        if self.domain_pattern and not self.domain_pattern.fullmatch(hostname):
            return None
        match = self.pattern.match(url)
        return match.group(self.id_group) if match else None


class MatchResult:
    """Result of an identifier match."""

    def __init__(self, kind: IdKind, media_id: str, original: str):
        self.kind = kind
        self.media_id = media_id
        self.original = original


# (domain_from): domain_to
URL_ALIASES: dict[str, str] = {
    "youtu.be": "youtube.com",
    "m.youtube.com": "youtube.com",
    "music.youtube.com": "youtube.com",
    "youtube-nocookie.com": "youtube.com",
}

_PATTERNS: list[URLPattern] = [
    URLPattern(
        IdKind.VIDEO,
        r"https?://(?:www\.)?youtube\.com/watch\?(?:.*?&)?v=(?P<id>[a-zA-Z0-9_-]{11})" + _ID_END,
    ),
    URLPattern(
        IdKind.VIDEO,
        r"https?://(?:www\.)?youtube\.com/(?:embed|v|shorts|live)/(?P<id>[a-zA-Z0-9_-]{11})" + _ID_END,
    ),
    URLPattern(
        IdKind.PLAYLIST,
        r"https?://(?:www\.)?youtube\.com/(?:playlist|watch)\?(?:.*?&)?list=(?P<id>[a-zA-Z0-9_-]+)" + _ID_END,
    ),
]


def normalize_url(url: str) -> str:
    """
    Normalize a URL by ensuring a scheme and resolving domain aliases.

    youtu.be short links are rewritten to the equivalent watch URL.
    """
    url = url.strip()

    if not url.startswith(("http://", "https://")):
        url = "https://" + url

    parsed = urlparse(url)
    hostname = (parsed.hostname or "").removeprefix("www.")

    if hostname == "youtu.be":
        video_id = parsed.path.lstrip("/").split("/")[0] if parsed.path else ""
        query = f"v={video_id}"
        if parsed.query:
            query = f"{query}&{parsed.query}"
        return urlunparse(parsed._replace(netloc="youtube.com", path="/watch", query=query))

    if hostname in URL_ALIASES:
        parsed = parsed._replace(netloc=URL_ALIASES[hostname])

    return urlunparse(parsed)


def match_identifier(raw: str, kind: IdKind | None = None) -> MatchResult | None:
    """
    Match a raw id or URL against the registered patterns.

    Bare ids are recognized first. When *kind* is given only patterns of
    that kind are tried. Returns None if nothing matches.
    """
    value = (raw or "").strip()
    if not value:
        return None

    if kind in (None, IdKind.VIDEO) and _VIDEO_ID_RE.match(value):
        return MatchResult(IdKind.VIDEO, value, raw)
    if kind in (None, IdKind.PLAYLIST) and _PLAYLIST_ID_RE.match(value):
        return MatchResult(IdKind.PLAYLIST, value, raw)

    normalized = normalize_url(value)
    hostname = urlparse(normalized).hostname or ""
    for pattern in _PATTERNS:
        if kind is not None and pattern.kind != kind:
            continue
        media_id = pattern.match(normalized, hostname)
        if media_id:
            return MatchResult(pattern.kind, media_id, raw)

    return None


def extract_video_id(raw: str) -> str:
    """Return the canonical video id for *raw*, raising InvalidIdentifier otherwise."""
    result = match_identifier(raw, IdKind.VIDEO)
    if result is None:
        raise InvalidIdentifier(f"Not a video id or URL: {raw!r}")
    return result.media_id


def extract_playlist_id(raw: str) -> str:
    """Return the canonical playlist id for *raw*, raising InvalidIdentifier otherwise."""
    result = match_identifier(raw, IdKind.PLAYLIST)
    if result is None:
        raise InvalidIdentifier(f"Not a playlist id or URL: {raw!r}")
    return result.media_id


def video_url(video_id: str) -> str:
    return WATCH_URL.format(id=video_id)


def playlist_url(playlist_id: str) -> str:
    return PLAYLIST_URL.format(id=playlist_id)
