"""
mockdispatch Mock Module

Request -> response mappings and the dispatch engine behind the mock clients.

This module provides:
- Request matchers and response resolvers
- Local (per client) and global mapping tables
- Dispatcher with local-before-global resolution
- requests and httpx interception hooks
"""

from .matcher import (
    RequestMatcher,
    ExactUrl,
    UrlPattern,
    Predicate,
    ExactRequest,
    coerce_matcher
)
from .resolver import (
    ResponseResolver,
    StaticResponse,
    ComputedResponse,
    Passthrough,
    PASSTHROUGH,
    coerce_resolver
)
from .table import MappingEntry, MappingTable, MappingScope
from .config import DispatchConfig, load_mappings
from .dispatcher import Dispatcher, TransportBinding
from .registry import ScopeRegistry, global_registry, get_global_registry, reset_global_registry
from .responses import make_response, make_httpx_response, respond_like
from .session import DispatchAdapter, MockSession, RequestsBinding
from .transport import DispatchTransport, MockClient, HttpxBinding

__all__ = [
    # Matchers
    'RequestMatcher',
    'ExactUrl',
    'UrlPattern',
    'Predicate',
    'ExactRequest',
    'coerce_matcher',

    # Resolvers
    'ResponseResolver',
    'StaticResponse',
    'ComputedResponse',
    'Passthrough',
    'PASSTHROUGH',
    'coerce_resolver',

    # Tables and scopes
    'MappingEntry',
    'MappingTable',
    'MappingScope',
    'ScopeRegistry',
    'global_registry',
    'get_global_registry',
    'reset_global_registry',

    # Dispatch
    'Dispatcher',
    'TransportBinding',
    'DispatchConfig',
    'load_mappings',

    # Responses
    'make_response',
    'make_httpx_response',
    'respond_like',

    # Client hooks
    'DispatchAdapter',
    'MockSession',
    'RequestsBinding',
    'DispatchTransport',
    'MockClient',
    'HttpxBinding',
]

__version__ = '1.0.0'
