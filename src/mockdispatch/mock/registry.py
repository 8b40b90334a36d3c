"""
mockdispatch Scope Registry

Owner of the process-wide (global) mapping table and dispatch config.

Every client consults the global table after its own local table. Tests that
want isolation can build their own ScopeRegistry and pass it to the clients;
``global_registry`` is the default used when none is given.
"""

import logging
from typing import Optional
from dataclasses import fields

from .config import DispatchConfig
from .table import MappingScope, MappingTable


class ScopeRegistry(MappingScope):
    """
    Global mapping scope.

    Example:
        registry = ScopeRegistry()
        registry.map('http://zzz.ru', make_response(400))

        session = MockSession(registry=registry)
        session.get('http://zzz.ru').status_code  # 400
    """

    def __init__(self, config: Optional[DispatchConfig] = None):
        """
        Initialize registry.

        Args:
            config: Dispatch configuration shared with every client
        """
        self.mappings = MappingTable(name="global")
        self.logger = logging.getLogger("mockdispatch")
        self.config = DispatchConfig()

        # The logger level is only touched when a config is given explicitly
        if config is not None:
            self.configure(config)

    def configure(self, config: DispatchConfig) -> None:
        """Apply a configuration and its log level."""
        self._copy_config(config)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

    def reset(self) -> None:
        """Drop every global mapping and restore the default configuration."""
        self.unmap_all()
        self._copy_config(DispatchConfig())

    def _copy_config(self, config: DispatchConfig) -> None:
        # Dispatchers hold a reference to self.config, so update it in place
        for f in fields(config):
            setattr(self.config, f.name, getattr(config, f.name))


global_registry = ScopeRegistry()


def get_global_registry() -> ScopeRegistry:
    """Return the process-wide default registry."""
    return global_registry


def reset_global_registry() -> None:
    """Reset the process-wide default registry."""
    global_registry.reset()
