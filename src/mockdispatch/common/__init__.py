"""
mockdispatch Common Utilities

Shared utilities and helpers used across mockdispatch modules.
"""

from .utils import canonical_request, to_text
from .url_utils import URLMatcher

__all__ = [
    'canonical_request',
    'to_text',
    'URLMatcher'
]
