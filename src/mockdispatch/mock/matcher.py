"""
mockdispatch Request Matcher

Request descriptors used to decide whether a stored mapping applies to an
incoming request.

Variants:
- ExactUrl: URL equality
- UrlPattern: regular expression search on the URL
- Predicate: caller-supplied function
- ExactRequest: full request equality (method, URL, headers, body)
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union
from dataclasses import dataclass

import httpx
import requests

from ..common import URLMatcher

# Request objects accepted as ExactRequest descriptors
REQUEST_TYPES = (requests.Request, requests.PreparedRequest, httpx.Request)

Canonicalizer = Callable[[Any], Optional[str]]


class RequestMatcher(ABC):
    """
    Base class for request descriptors.

    Subclasses implement ``matches``. The ``canonicalize`` callable is
    supplied by the dispatcher and turns a request into its canonical
    serialisation for the client type being dispatched; only ExactRequest
    uses it.
    """

    kind = 'unknown'

    @abstractmethod
    def matches(self, request: Any, canonicalize: Optional[Canonicalizer] = None) -> bool:
        """Return True if ``request`` satisfies this descriptor."""

    def describe(self) -> str:
        """Short human readable description for log messages."""
        return self.kind


@dataclass(frozen=True)
class ExactUrl(RequestMatcher):
    """
    Match when the request URL equals ``url``.

    Both sides are canonicalised first (see ``URLMatcher.canonical_url``).
    requests percent-quotes URLs while preparing them, so ``url`` must be
    given in quoted form: ``'http://a.ru/a%20b'`` matches a request for
    ``'http://a.ru/a b'``, but ``'http://a.ru/a b'`` itself never does.
    """

    url: str
    kind = 'exact_url'

    def matches(self, request: Any, canonicalize: Optional[Canonicalizer] = None) -> bool:
        return URLMatcher.urls_match(URLMatcher.url_of(request), self.url)

    def describe(self) -> str:
        return f"url == {self.url}"


@dataclass(frozen=True, init=False)
class UrlPattern(RequestMatcher):
    """
    Match when ``pattern`` is found anywhere in the request URL.

    The pattern is not anchored; use ``^`` and ``$`` explicitly.
    """

    pattern: re.Pattern
    kind = 'url_pattern'

    def __init__(self, pattern: Union[str, re.Pattern]):
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        object.__setattr__(self, 'pattern', pattern)

    def matches(self, request: Any, canonicalize: Optional[Canonicalizer] = None) -> bool:
        return self.pattern.search(URLMatcher.url_of(request)) is not None

    def describe(self) -> str:
        return f"url =~ /{self.pattern.pattern}/"


@dataclass(frozen=True)
class Predicate(RequestMatcher):
    """
    Match when ``func(request)`` is truthy.

    Exceptions raised by ``func`` propagate to the caller.
    """

    func: Callable[[Any], Any]
    kind = 'predicate'

    def matches(self, request: Any, canonicalize: Optional[Canonicalizer] = None) -> bool:
        return bool(self.func(request))

    def describe(self) -> str:
        return f"predicate {getattr(self.func, '__name__', repr(self.func))}"


@dataclass(frozen=True)
class ExactRequest(RequestMatcher):
    """
    Match when the incoming request equals the stored ``request``.

    Both requests are serialised by the client binding (see
    ``TransportBinding.canonicalize``) so header order does not matter.
    """

    request: Any
    kind = 'exact_request'

    def matches(self, request: Any, canonicalize: Optional[Canonicalizer] = None) -> bool:
        if canonicalize is None:
            return False

        stored = canonicalize(self.request)
        if stored is None:
            return False
        return stored == canonicalize(request)

    def describe(self) -> str:
        method = getattr(self.request, 'method', None) or 'GET'
        return f"request {method} {URLMatcher.url_of(self.request)}"


def coerce_matcher(descriptor: Any) -> RequestMatcher:
    """
    Turn a request descriptor into a RequestMatcher.

    Args:
        descriptor: URL string, compiled regex, callable, request object
            or an existing RequestMatcher

    Returns:
        RequestMatcher variant

    Raises:
        ValueError: If descriptor is None
        TypeError: If descriptor has an unsupported type
    """
    if descriptor is None:
        raise ValueError("A request descriptor is required")

    if isinstance(descriptor, RequestMatcher):
        return descriptor
    if isinstance(descriptor, REQUEST_TYPES):
        return ExactRequest(descriptor)
    if isinstance(descriptor, str):
        return ExactUrl(descriptor)
    if isinstance(descriptor, re.Pattern):
        return UrlPattern(descriptor)
    if callable(descriptor):
        return Predicate(descriptor)

    raise TypeError(
        "Request descriptor must be a URL string, compiled regex, callable "
        f"or request object, got {type(descriptor).__name__}"
    )
