"""
mockdispatch requests Hook

Transport adapter and session that route ``requests`` traffic through the
dispatcher instead of the network.

Example:
    session = MockSession()
    session.map('http://a.ru', make_response(201))
    session.get('http://a.ru').status_code  # 201
    session.get('http://b.ru').status_code  # 404

    # An existing session can be wired up too
    adapter = DispatchAdapter(session=plain_session)
    plain_session.mount('https://', adapter)
"""

from __future__ import annotations  # Enable forward references for type hints

from typing import Any, Optional

import requests
from requests.adapters import BaseAdapter, HTTPAdapter
from requests.structures import CaseInsensitiveDict

from ..common import canonical_request
from .dispatcher import Dispatcher, TransportBinding
from .registry import ScopeRegistry, global_registry
from .responses import make_response
from .table import MappingScope, MappingTable


class RequestsBinding(TransportBinding):
    """TransportBinding for ``requests``."""

    def __init__(self, session: Optional[requests.Session] = None):
        """
        Initialize binding.

        Args:
            session: Session whose default headers are used for exact
                request matching
        """
        self.session = session

    def is_response(self, obj: Any) -> bool:
        return isinstance(obj, requests.Response)

    def default_response(self, request: Any) -> requests.Response:
        return make_response(404, b'', request=request)

    def canonicalize(self, request: Any, prepare_default_headers: bool = True) -> Optional[str]:
        use_defaults = prepare_default_headers and self.session is not None

        if isinstance(request, requests.Request):
            if use_defaults:
                prepared = self.session.prepare_request(request)
            else:
                prepared = request.prepare()
        elif isinstance(request, requests.PreparedRequest):
            prepared = request
        else:
            return None

        headers = CaseInsensitiveDict(prepared.headers or {})
        if use_defaults:
            for name, value in self.session.headers.items():
                if value is not None and name not in headers:
                    headers[name] = value

        return canonical_request(prepared.method, prepared.url or '', headers.items(), prepared.body)


class DispatchAdapter(HTTPAdapter, MappingScope):
    """
    Transport adapter that answers requests from mock mappings.

    The adapter owns the local mapping table. Passthrough mappings are sent
    with ``real_adapter``, which is captured here before the adapter is
    mounted anywhere, so a passthrough never comes back to this adapter.
    """

    def __init__(
        self,
        registry: Optional[ScopeRegistry] = None,
        real_adapter: Optional[BaseAdapter] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize dispatch adapter.

        Args:
            registry: Global scope (defaults to ``global_registry``)
            real_adapter: Adapter used for passthrough mappings
            session: Session used for default header preparation
        """
        super().__init__()
        self.registry = registry if registry is not None else global_registry
        self.mappings = MappingTable(name="local")
        self.real_adapter = real_adapter if real_adapter is not None else HTTPAdapter()
        self.dispatcher = Dispatcher(RequestsBinding(session), self.registry.config)

    def send(
        self,
        request: requests.PreparedRequest,
        stream: bool = False,
        timeout: Any = None,
        verify: Any = True,
        cert: Any = None,
        proxies: Any = None
    ) -> requests.Response:
        """Resolve ``request`` from the local and global mappings."""

        def send_original(req: requests.PreparedRequest) -> requests.Response:
            return self.real_adapter.send(
                req,
                stream=stream,
                timeout=timeout,
                verify=verify,
                cert=cert,
                proxies=proxies
            )

        return self.dispatcher.dispatch(
            request,
            self.mappings,
            self.registry.mappings,
            send_original
        )

    def close(self) -> None:
        self.real_adapter.close()
        super().close()


class MockSession(requests.Session, MappingScope):
    """
    ``requests.Session`` whose every request is dispatched to mock mappings.

    Mappings registered on the session are local to it and are checked
    before the registry's global mappings.
    """

    def __init__(
        self,
        registry: Optional[ScopeRegistry] = None,
        real_adapter: Optional[BaseAdapter] = None
    ):
        """
        Initialize mock session.

        Args:
            registry: Global scope (defaults to ``global_registry``)
            real_adapter: Adapter used for passthrough mappings
        """
        super().__init__()
        self.adapter = DispatchAdapter(registry=registry, real_adapter=real_adapter, session=self)
        self.registry = self.adapter.registry
        self.mappings = self.adapter.mappings

        # Every scheme, including file://, goes through the dispatcher
        self.adapters.clear()
        self.mount('', self.adapter)
