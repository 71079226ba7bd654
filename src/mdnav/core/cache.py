"""Result cache for processed documents, keyed by content hash"""

import threading
from collections import OrderedDict
from typing import Optional, Protocol

from mdnav.core.models import ProcessedDocument


DEFAULT_MAX_ENTRIES = 1024


class ResultCache(Protocol):
    def get(self, key: str) -> Optional[ProcessedDocument]: ...
    def put(self, key: str, value: ProcessedDocument) -> None: ...


class MemoryCache:
    """In-process LRU cache shared by worker threads.

    Values are stored and returned whole under a lock; when two writers race
    on one key the last put wins. Returned documents are the stored objects
    (ProcessedDocument is frozen). Past max_entries the least recently used
    entry is evicted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self._data: OrderedDict[str, ProcessedDocument] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[ProcessedDocument]:
        with self._lock:
            value = self._data.get(key)
            if value is not None:
                self._data.move_to_end(key)
            return value

    def put(self, key: str, value: ProcessedDocument) -> None:
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            while len(self._data) > self.max_entries:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class NullCache:
    """Cache that stores nothing; used when caching is disabled."""

    def get(self, key: str) -> Optional[ProcessedDocument]:
        return None

    def put(self, key: str, value: ProcessedDocument) -> None:
        pass
