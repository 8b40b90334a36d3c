"""
mockdispatch Response Resolver

Response descriptors used to produce the response for a matched mapping.

Variants:
- StaticResponse: return a stored response object as-is
- ComputedResponse: build the response from the incoming request
- Passthrough: forward the request to the real transport
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from dataclasses import dataclass

import httpx
import requests

# Response objects accepted as StaticResponse descriptors
RESPONSE_TYPES = (requests.Response, httpx.Response)

SendFunc = Callable[[Any], Any]


class ResponseResolver(ABC):
    """Base class for response descriptors."""

    kind = 'unknown'

    @abstractmethod
    def resolve(self, request: Any, send_original: Optional[SendFunc] = None) -> Any:
        """Produce the response for a matched ``request``."""


@dataclass(frozen=True)
class StaticResponse(ResponseResolver):
    """Always return ``response``, the same object every time."""

    response: Any
    kind = 'static'

    def resolve(self, request: Any, send_original: Optional[SendFunc] = None) -> Any:
        return self.response


@dataclass(frozen=True)
class ComputedResponse(ResponseResolver):
    """
    Return whatever ``func(request)`` returns.

    The result is not inspected here; the dispatcher replaces anything that
    is not a response object with the default response.
    """

    func: Callable[[Any], Any]
    kind = 'computed'

    def resolve(self, request: Any, send_original: Optional[SendFunc] = None) -> Any:
        return self.func(request)


class Passthrough(ResponseResolver):
    """Send the request through the real transport captured by the client."""

    kind = 'passthrough'

    def resolve(self, request: Any, send_original: Optional[SendFunc] = None) -> Any:
        if send_original is None:
            raise RuntimeError("Passthrough requires the original send operation")
        return send_original(request)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Passthrough)

    def __hash__(self) -> int:
        return hash(Passthrough)

    def __repr__(self) -> str:
        return 'Passthrough()'


PASSTHROUGH = Passthrough()


def coerce_resolver(descriptor: Any) -> ResponseResolver:
    """
    Turn a response descriptor into a ResponseResolver.

    Args:
        descriptor: Response object, callable or an existing ResponseResolver

    Returns:
        ResponseResolver variant

    Raises:
        ValueError: If descriptor is None
        TypeError: If descriptor has an unsupported type
    """
    if descriptor is None:
        raise ValueError("A response descriptor is required")

    if isinstance(descriptor, ResponseResolver):
        return descriptor
    if isinstance(descriptor, RESPONSE_TYPES):
        return StaticResponse(descriptor)
    if callable(descriptor):
        return ComputedResponse(descriptor)

    raise TypeError(
        "Response descriptor must be a response object or callable, "
        f"got {type(descriptor).__name__}"
    )
