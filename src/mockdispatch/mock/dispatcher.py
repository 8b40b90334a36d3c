"""
mockdispatch Dispatcher

Resolves an incoming request against a local and a global mapping table.

Local mappings are always checked before global ones, each in insertion
order, and the first match wins. A request nobody mapped gets the default
404 response of the client binding.
"""

from __future__ import annotations  # Enable forward references for type hints

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from .config import DispatchConfig
from .matcher import RequestMatcher
from .resolver import Passthrough, ResponseResolver, SendFunc
from .table import MappingEntry, MappingTable

logger = logging.getLogger("mockdispatch.mock")


class TransportBinding(ABC):
    """
    Client specific operations the dispatcher needs.

    One implementation exists per supported HTTP client library.
    """

    @abstractmethod
    def is_response(self, obj: Any) -> bool:
        """Return True if ``obj`` is a response object of this client."""

    @abstractmethod
    def default_response(self, request: Any) -> Any:
        """Build the 404 response returned when nothing matched."""

    @abstractmethod
    def canonicalize(self, request: Any, prepare_default_headers: bool = True) -> Optional[str]:
        """
        Canonical serialisation of ``request`` for exact request matching.

        Returns None for request objects this client cannot serialise.
        """


class Dispatcher:
    """
    Dispatch engine shared by every client hook.

    Example:
        dispatcher = Dispatcher(RequestsBinding(session), config)
        response = dispatcher.dispatch(request, local_table, global_table)
    """

    def __init__(self, binding: TransportBinding, config: Optional[DispatchConfig] = None):
        """
        Initialize dispatcher.

        Args:
            binding: Client binding used for default responses and
                request canonicalisation
            config: Shared configuration (read on every dispatch)
        """
        self.binding = binding
        self.config = config or DispatchConfig()

    def dispatch(
        self,
        request: Any,
        local_table: MappingTable,
        global_table: MappingTable,
        send_original: Optional[SendFunc] = None
    ) -> Any:
        """
        Find the response for ``request``.

        Args:
            request: Incoming request of the bound client type
            local_table: Mappings of the client that sent the request
            global_table: Process-wide mappings
            send_original: Real send operation used by passthrough mappings

        Returns:
            Response object of the bound client type
        """
        candidates = local_table.entries() + global_table.entries()

        for entry in candidates:
            if not isinstance(entry.matcher, RequestMatcher):
                logger.warning(f"Unknown type of predefined request: {type(entry.matcher).__name__}")
                continue

            if entry.matcher.matches(request, self._canonicalize):
                logger.debug(f"Matched {entry.matcher.describe()}")
                return self._resolve(entry, request, send_original)

        url = getattr(request, 'url', '')
        if self.config.log_unmatched:
            logger.warning(f"No mapping found for {getattr(request, 'method', '')} {url}")
        else:
            logger.debug(f"No mapping found for {getattr(request, 'method', '')} {url}")

        return self.binding.default_response(request)

    def _canonicalize(self, request: Any) -> Optional[str]:
        return self.binding.canonicalize(
            request,
            prepare_default_headers=self.config.prepare_default_headers
        )

    def _resolve(self, entry: MappingEntry, request: Any, send_original: Optional[SendFunc]) -> Any:
        """Produce the response of a matched entry."""
        resolver = entry.resolver

        if not isinstance(resolver, ResponseResolver):
            logger.warning(f"Unknown type of predefined response: {type(resolver).__name__}")
            return self.binding.default_response(request)

        if isinstance(resolver, Passthrough):
            if send_original is None:
                logger.warning("Passthrough mapping matched but no real transport is available")
                return self.binding.default_response(request)
            return resolver.resolve(request, send_original)

        response = resolver.resolve(request)
        if not self.binding.is_response(response):
            logger.warning(f"Unknown type of predefined response: {type(response).__name__}")
            return self.binding.default_response(request)

        return response
