"""
mockdispatch httpx Hook

Transport and client that route synchronous ``httpx`` traffic through the
dispatcher instead of the network.

Example:
    client = MockClient()
    client.map('http://a.ru', make_httpx_response(201))
    client.get('http://a.ru').status_code  # 201
"""

from __future__ import annotations  # Enable forward references for type hints

from typing import Any, Optional

import httpx

from ..common import canonical_request
from .dispatcher import Dispatcher, TransportBinding
from .registry import ScopeRegistry, global_registry
from .responses import make_httpx_response
from .table import MappingScope, MappingTable


class HttpxBinding(TransportBinding):
    """TransportBinding for ``httpx``."""

    def __init__(self, client: Optional[httpx.Client] = None):
        self.client = client

    def is_response(self, obj: Any) -> bool:
        return isinstance(obj, httpx.Response)

    def default_response(self, request: Any) -> httpx.Response:
        return make_httpx_response(404, b'', request=request)

    def canonicalize(self, request: Any, prepare_default_headers: bool = True) -> Optional[str]:
        if not isinstance(request, httpx.Request):
            return None

        headers = list(request.headers.multi_items())
        if prepare_default_headers and self.client is not None:
            for name, value in self.client.headers.multi_items():
                if name not in request.headers:
                    headers.append((name, value))

        return canonical_request(request.method, str(request.url), headers, request.read())


class DispatchTransport(httpx.BaseTransport, MappingScope):
    """
    Transport that answers requests from mock mappings.

    Owns the local mapping table. Passthrough mappings are handled by
    ``real_transport``, captured at construction.
    """

    def __init__(
        self,
        registry: Optional[ScopeRegistry] = None,
        real_transport: Optional[httpx.BaseTransport] = None,
        client: Optional[httpx.Client] = None
    ):
        """
        Initialize dispatch transport.

        Args:
            registry: Global scope (defaults to ``global_registry``)
            real_transport: Transport used for passthrough mappings
            client: Client used for default header preparation
        """
        self.registry = registry if registry is not None else global_registry
        self.mappings = MappingTable(name="local")
        self.real_transport = real_transport if real_transport is not None else httpx.HTTPTransport()
        self.dispatcher = Dispatcher(HttpxBinding(client), self.registry.config)

    def bind_client(self, client: httpx.Client) -> None:
        """Use ``client`` default headers for exact request matching."""
        self.dispatcher.binding.client = client

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self.dispatcher.dispatch(
            request,
            self.mappings,
            self.registry.mappings,
            self.real_transport.handle_request
        )

    def close(self) -> None:
        self.real_transport.close()


class MockClient(httpx.Client, MappingScope):
    """
    ``httpx.Client`` whose every request is dispatched to mock mappings.

    Extra keyword arguments go to ``httpx.Client``.
    """

    def __init__(
        self,
        registry: Optional[ScopeRegistry] = None,
        real_transport: Optional[httpx.BaseTransport] = None,
        **kwargs: Any
    ):
        transport = DispatchTransport(registry=registry, real_transport=real_transport)
        super().__init__(transport=transport, **kwargs)
        transport.bind_client(self)

        self.dispatch_transport = transport
        self.registry = transport.registry
        self.mappings = transport.mappings
