"""
API route definitions for the Media Resolver.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from ..config import get_settings
from ..core.url_matcher import extract_video_id
from ..errors import (
    InvalidIdentifier,
    NoCompatibleRendition,
    PageOutOfOrder,
    ResolverError,
    UpstreamFetchError,
)
from ..models.enums import QualityTier
from ..models.media import MediaItem, SubtitleItem
from ..models.request import PlaybackRequest, PreferencesUpdate, SubtitleRequest
from ..models.response import (
    ErrorResponse,
    PlaybackResponse,
    Preferences,
    SearchResponse,
    TrendingResponse,
)
from ..source import MediaSource

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_ERROR: list[tuple[type[ResolverError], int]] = [
    (InvalidIdentifier, 400),
    (PageOutOfOrder, 409),
    (NoCompatibleRendition, 422),
    (UpstreamFetchError, 502),
]

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid video or playlist identifier"},
    502: {"model": ErrorResponse, "description": "Upstream platform lookup failed"},
    503: {"model": ErrorResponse, "description": "No platform client configured"},
}


def _raise_for(error: ResolverError):
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(error, cls)), 500)
    raise HTTPException(
        status_code=status,
        detail=ErrorResponse(error=str(error), error_code=error.error_code).model_dump(),
    )


def get_source(request: Request) -> MediaSource:
    source: MediaSource | None = getattr(request.app.state, "source", None)
    if source is None:
        raise HTTPException(
            status_code=503,
            detail=ErrorResponse(
                error="No platform client configured",
                error_code="client.unavailable",
            ).model_dump(),
        )
    return source


@router.post(
    "/playback",
    response_model=PlaybackResponse,
    responses={
        **_ERROR_RESPONSES,
        422: {"model": ErrorResponse, "description": "No compatible audio rendition"},
    },
    summary="Resolve video and audio stream URLs for playback",
)
async def resolve_playback(body: PlaybackRequest, request: Request):
    source = get_source(request)
    quality = source.preferred_quality if body.quality is None else body.quality
    try:
        resolved = await source.resolve_playback(body.id, quality)
    except ResolverError as e:
        logger.info("Playback resolution failed for %s: %s", body.id, e)
        _raise_for(e)

    return PlaybackResponse(
        id=extract_video_id(body.id),
        video_url=resolved.video_url,
        audio_url=resolved.audio_url,
        quality=quality,
        player_options=resolved.player_options(body.start_time),
    )


@router.post(
    "/subtitles",
    response_model=list[SubtitleItem],
    responses=_ERROR_RESPONSES,
    summary="Subtitle tracks for a video, target language first",
)
async def resolve_subtitles(body: SubtitleRequest, request: Request):
    source = get_source(request)
    try:
        return await source.resolve_subtitles(body.id, body.language)
    except ResolverError as e:
        _raise_for(e)


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Page requested before the previous page"},
        503: _ERROR_RESPONSES[503],
    },
    summary="Search videos, one page at a time",
    description=(
        "Pages must be requested in increasing order starting from 1. "
        "has_more turns false once the listing is exhausted or a page fails to load."
    ),
)
async def search(
    request: Request,
    q: str = Query(..., min_length=1, max_length=256),
    page: int = Query(1, ge=1),
    captions: bool | None = Query(None, description="Only videos with closed captions"),
):
    source = get_source(request)
    try:
        items = await source.search(q, page, captions)
    except UpstreamFetchError as e:
        # A failed page ends the listing instead of failing the whole result list
        logger.warning("Search %r page %d failed, ending listing: %s", q, page, e)
        return SearchResponse(items=[], page=page, has_more=False)
    except ResolverError as e:
        _raise_for(e)

    if items is None:
        return SearchResponse(items=[], page=page, has_more=False)
    return SearchResponse(items=items, page=page, has_more=True)


@router.get("/suggest", response_model=list[str], summary="Query suggestions")
async def suggest(request: Request, q: str = Query("", max_length=256)):
    source = get_source(request)
    try:
        return await source.suggest(q)
    except ResolverError as e:
        _raise_for(e)


@router.get(
    "/trending",
    response_model=TrendingResponse,
    responses={404: {"model": ErrorResponse, "description": "No trending playlist for language"}},
    summary="Trending playlist for a language tag",
)
async def trending(request: Request, language: str = Query(..., examples=["ja-JP"])):
    source = get_source(request)
    try:
        page = await source.trending_page(language)
    except ResolverError as e:
        _raise_for(e)

    if page is None:
        raise HTTPException(
            status_code=404,
            detail=ErrorResponse(
                error=f"No trending playlist for {language}",
                error_code="trending.unsupported_language",
            ).model_dump(),
        )
    return page


@router.get(
    "/trending/{playlist_id}",
    response_model=list[MediaItem],
    responses=_ERROR_RESPONSES,
    summary="Playable videos of a playlist",
)
async def trending_playlist(playlist_id: str, request: Request):
    source = get_source(request)
    items: list[MediaItem] = []
    try:
        async for item in source.list_trending_playlist(playlist_id):
            items.append(item)
    except UpstreamFetchError as e:
        logger.warning("Playlist %s listing stopped after %d items: %s", playlist_id, len(items), e)
    except ResolverError as e:
        _raise_for(e)
    return items


@router.get("/preferences", response_model=Preferences, summary="Stored user preferences")
async def get_preferences(request: Request):
    source = get_source(request)
    return Preferences(
        preferred_quality=source.preferred_quality,
        caption_filter=source.caption_filter_on,
    )


@router.put("/preferences", response_model=Preferences, summary="Update user preferences")
async def update_preferences(body: PreferencesUpdate, request: Request):
    source = get_source(request)
    if body.preferred_quality is not None:
        source.set_preferred_quality(QualityTier(body.preferred_quality))
    if body.caption_filter is not None:
        source.set_caption_filter(body.caption_filter)
    return Preferences(
        preferred_quality=source.preferred_quality,
        caption_filter=source.caption_filter_on,
    )


@router.get("/health", summary="Health check")
async def health_check(request: Request):
    source: MediaSource | None = getattr(request.app.state, "source", None)
    settings = source.settings if source is not None else get_settings()
    return {
        "status": "healthy" if source is not None else "degraded",
        "client": type(source.client).__name__ if source is not None else None,
        "caches": source.stats() if source is not None else {},
        "fetch_timeout": settings.fetch_timeout,
    }
