# appia/services/response_cache.py
from __future__ import annotations

import hashlib
import json
import threading
from collections import OrderedDict
from typing import Any, Dict, Generic, List, Optional, TypeVar

V = TypeVar("V")


def cache_key(model: str, system: str, messages: List[Dict[str, Any]], max_tokens: int) -> str:
    payload = json.dumps(
        {"model": model, "system": system, "messages": messages, "max_tokens": max_tokens},
        sort_keys=True,
        ensure_ascii=False,
    )
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class ResponseCache(Generic[V]):
    """Capacity-bounded LRU map. Capacity 0 disables caching."""

    def __init__(self, capacity: int = 100):
        self.capacity = max(capacity, 0)
        self._items: "OrderedDict[str, V]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            if key not in self._items:
                return None
            self._items.move_to_end(key)
            return self._items[key]

    def put(self, key: str, value: V) -> None:
        if self.capacity == 0:
            return
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            while len(self._items) > self.capacity:
                self._items.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items
