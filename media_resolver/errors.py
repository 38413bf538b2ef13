"""
Error taxonomy shared by the caches, selectors and the HTTP surface.

End of a listing is not an error: it is reported as ``None``.
"""


class ResolverError(Exception):
    """Base class for every failure surfaced by the resolver."""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class InvalidIdentifier(ResolverError):
    """The input matches no known video or playlist id/URL shape. Not retryable."""

    def __init__(self, message: str, error_code: str | None = "identifier.invalid"):
        super().__init__(message, error_code)


class UpstreamFetchError(ResolverError):
    """The platform lookup failed or timed out. Callers may retry."""

    def __init__(self, message: str, error_code: str | None = "upstream.fetch_failed"):
        super().__init__(message, error_code)


class NoCompatibleRendition(ResolverError):
    """No rendition satisfies the codec policy. Fatal for the playback request."""

    def __init__(self, message: str, error_code: str | None = "rendition.none"):
        super().__init__(message, error_code)


class PageOutOfOrder(ResolverError):
    """A page was requested before the page it continues from was loaded."""

    def __init__(self, message: str, error_code: str | None = "listing.page_out_of_order"):
        super().__init__(message, error_code)
