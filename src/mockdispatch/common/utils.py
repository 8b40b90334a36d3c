"""
mockdispatch Common Utilities

Canonical request serialisation shared by the client bindings.
"""

import json
from typing import Any, Iterable, Optional, Tuple

from .url_utils import URLMatcher


def to_text(value: Any) -> str:
    """
    Convert a header value or body to text without losing bytes.

    Bytes are decoded as latin-1 so every byte maps to exactly one character.
    """
    if value is None:
        return ''
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('latin-1')
    return str(value)


def canonical_request(
    method: Optional[str],
    url: str,
    headers: Iterable[Tuple[Any, Any]],
    body: Any = None
) -> str:
    """
    Serialise a request into a canonical, order-independent string.

    Header names are lowercased and the header list is sorted, so two
    requests that only differ in header order serialise identically.

    Args:
        method: HTTP method
        url: Request URL
        headers: Iterable of (name, value) pairs
        body: Request body (bytes, str or None)

    Returns:
        JSON string suitable for equality comparison

    Example:
        canonical_request('GET', 'http://a.ru/', [('Accept', '*/*')])
    """
    header_pairs = sorted(
        (to_text(name).lower(), to_text(value)) for name, value in headers
    )

    if body is None or isinstance(body, (bytes, bytearray, str)):
        body_text = to_text(body)
    else:
        # Streams and file objects cannot be compared by content
        body_text = repr(body)

    return json.dumps({
        'method': (method or 'GET').upper(),
        'url': URLMatcher.canonical_url(url),
        'headers': header_pairs,
        'body': body_text
    }, sort_keys=True)
