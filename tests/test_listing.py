"""Tests for the page-keyed listing cache."""

import pytest

from media_resolver.core.listing import ListingCache, listing_key, playable
from media_resolver.errors import PageOutOfOrder
from media_resolver.models.media import ListingPage

from .conftest import make_video


class _Upstream:
    """Serves a fixed number of pages, counting calls."""

    def __init__(self, page_count: int):
        self.page_count = page_count
        self.first_calls = 0
        self.next_calls = 0

    async def first_page(self):
        self.first_calls += 1
        if self.page_count == 0:
            return None
        return ListingPage(videos=(make_video(0),), cursor=0)

    async def next_page(self, page):
        self.next_calls += 1
        index = page.cursor + 1
        if index >= self.page_count:
            return None
        return ListingPage(videos=(make_video(index),), cursor=index)


class TestListingKey:
    def test_plain(self):
        assert listing_key("  cats ") == "cats"

    def test_filtered_key_is_distinct(self):
        assert listing_key("cats", caption_filter=True) != listing_key("cats")
        assert listing_key("cats", caption_filter=True) == "cats [filter:cc]"


class TestPlayable:
    def test_drops_unknown_and_zero_durations(self):
        videos = [make_video(1), make_video(2, duration=None), make_video(3, duration=0)]
        assert [v.id for v in playable(videos)] == [make_video(1).id]


class TestGetPage:
    @pytest.mark.asyncio
    async def test_sequential_pages(self, settings):
        cache = ListingCache(settings)
        upstream = _Upstream(page_count=3)
        pages = [
            await cache.get_page("q", n, upstream.first_page, upstream.next_page) for n in (1, 2, 3)
        ]
        assert [p.cursor for p in pages] == [0, 1, 2]
        assert upstream.first_calls == 1
        assert upstream.next_calls == 2

    @pytest.mark.asyncio
    async def test_cached_page_not_refetched(self, settings):
        cache = ListingCache(settings)
        upstream = _Upstream(page_count=2)
        await cache.get_page("q", 1, upstream.first_page, upstream.next_page)
        await cache.get_page("q", 1, upstream.first_page, upstream.next_page)
        assert upstream.first_calls == 1

    @pytest.mark.asyncio
    async def test_page_before_previous_raises(self, settings):
        cache = ListingCache(settings)
        upstream = _Upstream(page_count=3)
        with pytest.raises(PageOutOfOrder) as exc_info:
            await cache.get_page("q", 2, upstream.first_page, upstream.next_page)
        assert exc_info.value.error_code == "listing.page_out_of_order"
        assert upstream.first_calls == 0
        assert upstream.next_calls == 0

    @pytest.mark.asyncio
    async def test_exhausted_listing_is_cached(self, settings):
        cache = ListingCache(settings)
        upstream = _Upstream(page_count=1)
        assert await cache.get_page("q", 1, upstream.first_page, upstream.next_page) is not None
        assert await cache.get_page("q", 2, upstream.first_page, upstream.next_page) is None
        assert await cache.get_page("q", 2, upstream.first_page, upstream.next_page) is None
        # Past the end: no further upstream calls
        assert await cache.get_page("q", 3, upstream.first_page, upstream.next_page) is None
        assert upstream.next_calls == 1

    @pytest.mark.asyncio
    async def test_empty_first_page(self, settings):
        cache = ListingCache(settings)
        upstream = _Upstream(page_count=0)
        assert await cache.get_page("q", 1, upstream.first_page, upstream.next_page) is None
        assert await cache.get_page("q", 2, upstream.first_page, upstream.next_page) is None
        assert upstream.first_calls == 1
        assert upstream.next_calls == 0

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, settings):
        cache = ListingCache(settings)
        upstream = _Upstream(page_count=2)
        await cache.get_page("a", 1, upstream.first_page, upstream.next_page)
        with pytest.raises(PageOutOfOrder):
            await cache.get_page("b", 2, upstream.first_page, upstream.next_page)
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_rejects_page_zero(self, settings):
        cache = ListingCache(settings)
        upstream = _Upstream(page_count=1)
        with pytest.raises(ValueError):
            await cache.get_page("q", 0, upstream.first_page, upstream.next_page)
