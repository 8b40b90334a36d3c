"""
mockdispatch

Deterministic HTTP responses for tests: register request -> response
mappings globally or per client and every request is answered from them
without touching the network.
"""

from .mock import *  # noqa: F401,F403
from .mock import __all__, __version__
