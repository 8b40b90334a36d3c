"""
mockdispatch URL Utilities

Shared URL parsing and canonicalisation used by the request matchers.
"""

from urllib.parse import urlsplit, urlunsplit
from typing import Any


class URLMatcher:
    """Handles URL comparison for mock mappings."""

    @staticmethod
    def url_of(request: Any) -> str:
        """
        Get the URL of a request as a plain string.

        Works for ``requests`` prepared requests (``str`` url) and for
        ``httpx`` requests (``httpx.URL`` url).
        """
        url = getattr(request, 'url', None)
        if url is None:
            return ''
        if isinstance(url, bytes):
            return url.decode('utf-8')
        return str(url)

    @staticmethod
    def canonical_url(url: str) -> str:
        """
        Canonicalise URL for comparison.

        Lowercases scheme and host, turns an empty path into ``/`` when a
        host is present and drops the fragment. Query order is preserved.

        Args:
            url: URL to canonicalise

        Returns:
            Canonical URL string
        """
        parsed = urlsplit(url)
        path = parsed.path
        if parsed.netloc and not path:
            path = '/'

        return urlunsplit((
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            path,
            parsed.query,
            ''  # Remove fragment
        ))

    @staticmethod
    def urls_match(url1: str, url2: str) -> bool:
        """
        Compare two URLs for matching.

        Args:
            url1: First URL
            url2: Second URL

        Returns:
            True if URLs are equal as given or after canonicalisation
        """
        # Exact match first
        if url1 == url2:
            return True

        return URLMatcher.canonical_url(url1) == URLMatcher.canonical_url(url2)
