"""Subtitle track selection: one human-authored track per language, target language first."""

import logging
from collections.abc import Awaitable, Callable

from ..models.manifest import CaptionManifest, CaptionTrack
from ..models.media import SubtitleItem

logger = logging.getLogger(__name__)


def accepted_tracks(manifest: CaptionManifest) -> list[CaptionTrack]:
    """Tracks in manifest order, skipping auto-generated ones and repeated languages."""
    seen: set[str] = set()
    tracks: list[CaptionTrack] = []
    for track in manifest.tracks:
        if track.language_code in seen or track.is_auto_generated:
            continue
        seen.add(track.language_code)
        tracks.append(track)
    return tracks


def prioritize(items: list[SubtitleItem], language_code: str | None) -> list[SubtitleItem]:
    """Move the item for *language_code* to the front; the rest keep their order."""
    for index, item in enumerate(items):
        if item.language_code == language_code:
            return [item, *items[:index], *items[index + 1 :]]
    return list(items)


async def select_subtitles(
    manifest: CaptionManifest,
    target_language: str | None,
    fetch_text: Callable[[CaptionTrack], Awaitable[str]],
    source_name: str = "YouTube",
) -> list[SubtitleItem]:
    """
    Build the ordered subtitle list for a playback session.

    Track text is fetched once per accepted track and not kept beyond this
    call. An empty list is returned when no track qualifies.
    """
    items: list[SubtitleItem] = []
    for track in accepted_tracks(manifest):
        text = await fetch_text(track)
        items.append(
            SubtitleItem(
                language_code=track.language_code,
                text=text,
                label=f"{source_name} - [{track.language_code}]",
                format=track.format,
            )
        )

    logger.debug(
        "Selected %d of %d caption tracks (target=%s)",
        len(items),
        len(manifest.tracks),
        target_language,
    )
    return prioritize(items, target_language)
