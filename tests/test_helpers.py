"""Tests for the metadata coercion helpers."""

import pytest

from media_resolver.utils.helpers import float_or_none, int_or_none, str_or_none, url_or_none


class TestIntOrNone:
    @pytest.mark.parametrize(
        ("val", "expected"),
        [
            (7, 7),
            ("4", 4),
            ("4.5", None),  # int() rejects decimal strings
            (None, None),
            ("high", None),
        ],
    )
    def test_values(self, val, expected):
        assert int_or_none(val) == expected

    def test_scale(self):
        # bitrate in bps to kbps
        assert int_or_none("256000", scale=1000) == 256


class TestFloatOrNone:
    @pytest.mark.parametrize(
        ("val", "expected"),
        [
            (212.5, 212.5),
            ("61", 61.0),
            (None, None),
            ("live", None),
        ],
    )
    def test_values(self, val, expected):
        assert float_or_none(val) == expected

    def test_scale(self):
        # duration in milliseconds to seconds
        assert float_or_none(90_000, scale=1000) == 90.0


class TestStrOrNone:
    def test_strips(self):
        assert str_or_none("  Rick Astley ") == "Rick Astley"

    def test_blank(self):
        assert str_or_none("   ") is None
        assert str_or_none(None) is None

    def test_non_string(self):
        assert str_or_none(42) == "42"


class TestUrlOrNone:
    def test_https(self):
        url = "https://i.ytimg.com/vi/dQw4w9WgXcQ/mqdefault.jpg"
        assert url_or_none(url) == url

    def test_protocol_relative(self):
        assert url_or_none("//i.ytimg.com/vi/x/default.jpg") == "https://i.ytimg.com/vi/x/default.jpg"

    def test_rejects_non_urls(self):
        assert url_or_none(None) is None
        assert url_or_none("") is None
        assert url_or_none("i.ytimg.com/vi/x/default.jpg") is None
        assert url_or_none(123) is None
