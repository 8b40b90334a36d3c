"""
mockdispatch Mapping Table

Ordered storage of request -> response mappings for one scope.

Slots are addressed by the index returned from ``add``. Removing a mapping
leaves an empty slot behind so every other index stays valid. ``clear``
starts a new generation: indices restart at 0 and indices handed out before
the clear no longer refer to anything meaningful.
"""

import logging
import threading
from typing import Any, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from .matcher import RequestMatcher, coerce_matcher
from .resolver import PASSTHROUGH, ResponseResolver, coerce_resolver

logger = logging.getLogger("mockdispatch.mock")


@dataclass(frozen=True)
class MappingEntry:
    """A single request -> response mapping."""

    matcher: RequestMatcher
    resolver: ResponseResolver


class MappingTable:
    """
    Append-only table of mappings with tombstone removal.

    Example:
        table = MappingTable()
        index = table.add('http://a.ru', make_response(201))
        table.remove(index)
        table.clear()
    """

    def __init__(self, name: str = "local"):
        """
        Initialize mapping table.

        Args:
            name: Scope name used in log messages
        """
        self.name = name
        self._slots: List[Optional[MappingEntry]] = []
        self._lock = threading.Lock()

    def add(self, request: Any, response: Any) -> int:
        """
        Append a mapping.

        Args:
            request: Request descriptor (see ``coerce_matcher``)
            response: Response descriptor (see ``coerce_resolver``)

        Returns:
            Index of the new slot

        Raises:
            ValueError: If a descriptor is missing
            TypeError: If a descriptor has an unsupported type
        """
        if request is None or response is None:
            raise ValueError("You should pass both a request and a response descriptor")

        entry = MappingEntry(coerce_matcher(request), coerce_resolver(response))
        with self._lock:
            self._slots.append(entry)
            index = len(self._slots) - 1

        logger.debug(f"[{self.name}] mapped #{index}: {entry.matcher.describe()} -> {entry.resolver.kind}")
        return index

    def add_passthrough(self, request: Any) -> int:
        """Append a mapping that forwards matching requests to the real transport."""
        return self.add(request, PASSTHROUGH)

    def remove(self, index: Any) -> bool:
        """
        Tombstone the slot at ``index``.

        Invalid indices are logged and ignored. Removing an already removed
        slot is a no-op that still reports success.

        Args:
            index: Slot index returned by ``add``

        Returns:
            True if the slot is now empty, False if the index was rejected
        """
        if index is None or isinstance(index, bool) or not isinstance(index, int):
            logger.warning(f"[{self.name}] unmap() needs a non-negative integer index, got {index!r}")
            return False

        with self._lock:
            if not self._slots:
                logger.warning(f"[{self.name}] unmap() called before any map()")
                return False

            if index < 0 or index >= len(self._slots):
                logger.warning(f"[{self.name}] Index {index} is out of maps range")
                return False

            self._slots[index] = None

        logger.debug(f"[{self.name}] unmapped #{index}")
        return True

    def clear(self) -> None:
        """Drop every mapping and restart indices at 0."""
        with self._lock:
            self._slots = []
        logger.debug(f"[{self.name}] unmapped all")

    def entries(self) -> List[MappingEntry]:
        """Snapshot of live entries in insertion order."""
        with self._lock:
            return [entry for entry in self._slots if entry is not None]

    def items(self) -> Iterator[Tuple[int, MappingEntry]]:
        """Iterate over (index, entry) pairs of live slots."""
        with self._lock:
            snapshot = list(self._slots)
        for index, entry in enumerate(snapshot):
            if entry is not None:
                yield index, entry

    @property
    def live_count(self) -> int:
        """Number of live entries."""
        return len(self.entries())

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"MappingTable(name={self.name!r}, slots={len(self)}, live={self.live_count})"


class MappingScope:
    """
    Public map/unmap surface shared by the global registry and the clients.

    Subclasses set ``self.mappings`` to the MappingTable they own.
    """

    mappings: MappingTable

    def map(self, request: Any, response: Any) -> int:
        """Register a mapping in this scope and return its index."""
        return self.mappings.add(request, response)

    def map_passthrough(self, request: Any) -> int:
        """Register a mapping whose requests go to the real transport."""
        return self.mappings.add_passthrough(request)

    def unmap(self, index: Any) -> bool:
        """Remove the mapping at ``index``."""
        return self.mappings.remove(index)

    def unmap_all(self) -> None:
        """Remove every mapping in this scope."""
        self.mappings.clear()
