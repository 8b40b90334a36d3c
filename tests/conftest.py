"""Shared fixtures for mockdispatch tests."""

import logging

import pytest
from requests.adapters import BaseAdapter

from mockdispatch import make_response, reset_global_registry


class RecordingAdapter(BaseAdapter):
    """Stand-in for the real transport: records requests and answers 200."""

    def __init__(self, content=b'real transport'):
        super().__init__()
        self.content = content
        self.sent = []
        self.closed = False

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.sent.append(request)
        return make_response(200, self.content, request=request)

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def clean_global_registry():
    """Every test starts and ends with an empty global scope."""
    reset_global_registry()
    yield
    reset_global_registry()


@pytest.fixture(autouse=True)
def restore_log_level():
    """Tests that configure a registry must not change the level for later tests."""
    logger = logging.getLogger('mockdispatch')
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture
def real_adapter():
    """Recording adapter used as the real transport for passthrough."""
    return RecordingAdapter()
