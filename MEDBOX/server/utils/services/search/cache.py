from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Generic, TypeVar

KT = TypeVar("KT")
VT = TypeVar("VT")
CACHE_MISS = object()


###############################################################################
class SearchResultCache(Generic[KT, VT]):
    """
    Bounded query cache with batch eviction by insertion order.

    When the cache is full, the oldest half of the entries is dropped before
    the new entry is stored. Entries are tied to the catalog generation they
    were computed against and are discarded as soon as a different generation
    is observed. A capacity of zero disables caching.

    """

    __slots__ = ("capacity", "store", "generation", "lock")

    def __init__(self, capacity: int) -> None:
        capacity = int(capacity)
        if capacity < 0:
            raise ValueError(f"Cache capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self.store: OrderedDict[KT, VT] = OrderedDict()
        self.generation: int | None = None
        self.lock = threading.Lock()

    # -------------------------------------------------------------------------
    def sync_generation(self, generation: int) -> None:
        if self.generation == generation:
            return
        self.store.clear()
        self.generation = generation

    # -------------------------------------------------------------------------
    def get(self, key: KT, generation: int, default: Any = CACHE_MISS) -> Any:
        with self.lock:
            self.sync_generation(generation)
            return self.store.get(key, default)

    # -------------------------------------------------------------------------
    def put(self, key: KT, value: VT, generation: int) -> None:
        if self.capacity == 0:
            return
        with self.lock:
            self.sync_generation(generation)
            if key in self.store:
                self.store[key] = value
                return
            if len(self.store) >= self.capacity:
                self.evict_oldest(max(1, self.capacity // 2))
            self.store[key] = value

    # -------------------------------------------------------------------------
    def evict_oldest(self, count: int) -> None:
        for _ in range(min(count, len(self.store))):
            self.store.popitem(last=False)

    # -------------------------------------------------------------------------
    def clear(self) -> None:
        with self.lock:
            self.store.clear()

    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.store)
