"""
mockdispatch Canned Responses

Helpers for building client response objects without a network round trip.
"""

import io
from http.client import responses as HTTP_REASONS
from typing import Any, Dict, Optional, Union

import httpx
import requests
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers
from urllib3.response import HTTPResponse

Body = Union[bytes, str]


def _to_bytes(content: Optional[Body]) -> bytes:
    if content is None:
        return b''
    if isinstance(content, str):
        return content.encode('utf-8')
    return content


def make_response(
    status: int = 200,
    content: Optional[Body] = b'',
    headers: Optional[Dict[str, str]] = None,
    reason: Optional[str] = None,
    url: Optional[str] = None,
    request: Any = None
) -> requests.Response:
    """
    Build a ``requests.Response``.

    The body is backed by a ``urllib3`` response so ``raw``, ``iter_content``
    and ``close`` behave like a real response.

    Args:
        status: HTTP status code
        content: Response body (str is encoded as UTF-8)
        headers: Response headers
        reason: Reason phrase (defaults to the standard phrase for status)
        url: Response URL
        request: PreparedRequest the response belongs to

    Returns:
        requests.Response

    Example:
        session.map('http://a.ru', make_response(201))
    """
    body = _to_bytes(content)
    headers = headers or {}
    reason = reason if reason is not None else HTTP_REASONS.get(status, '')

    raw = HTTPResponse(
        body=io.BytesIO(body),
        headers=headers,
        status=status,
        reason=reason,
        preload_content=False,
        decode_content=False
    )

    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers)
    response.encoding = get_encoding_from_headers(response.headers)
    response.raw = raw
    response.url = url if url is not None else getattr(request, 'url', None)
    response.request = request
    response._content = body
    return response


def make_httpx_response(
    status: int = 200,
    content: Optional[Body] = b'',
    headers: Optional[Dict[str, str]] = None,
    request: Optional[httpx.Request] = None
) -> httpx.Response:
    """
    Build an ``httpx.Response``.

    Args:
        status: HTTP status code
        content: Response body (str is encoded as UTF-8)
        headers: Response headers
        request: Request the response belongs to

    Returns:
        httpx.Response
    """
    return httpx.Response(
        status,
        headers=headers or {},
        content=_to_bytes(content),
        request=request
    )


def respond_like(
    request: Any,
    status: int = 200,
    content: Optional[Body] = b'',
    headers: Optional[Dict[str, str]] = None
) -> Union[requests.Response, httpx.Response]:
    """Build a response of the same client library as ``request``."""
    if isinstance(request, httpx.Request):
        return make_httpx_response(status, content, headers, request=request)
    return make_response(status, content, headers, request=request)
