"""
Result cache for discovery responses.

Keys are derived from the normalized request, the local calendar day (so a
"today" query never outlives its day) and the snapshot generation (so a
reloaded catalog never serves stale pages).

Sync endpoints run in a threadpool, so every access to the shared state goes
through ``_lock``.
"""
from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from typing import Any

from .config import DEFAULT_DISCOVERY_CONFIG

_MAX_ENTRIES = 512

_lock = threading.Lock()
_entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
_generation: int = 0
_stats = {"hits": 0, "misses": 0, "evictions": 0}


def make_key(request_dict: dict, day: str) -> str:
    with _lock:
        generation = _generation
    payload = {"request": request_dict, "day": day, "generation": generation}
    normalized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(key: str, ttl: int = DEFAULT_DISCOVERY_CONFIG.cache_ttl) -> Any | None:
    with _lock:
        stored = _entries.get(key)
        if stored is not None:
            stored_at, value = stored
            if time.time() - stored_at < ttl:
                _stats["hits"] += 1
                _entries.move_to_end(key)
                return value
            _entries.pop(key, None)
        _stats["misses"] += 1
        return None


def cache_set(key: str, value: Any) -> None:
    with _lock:
        _entries[key] = (time.time(), value)
        _entries.move_to_end(key)
        while len(_entries) > _MAX_ENTRIES:
            _entries.popitem(last=False)
            _stats["evictions"] += 1


def invalidate() -> None:
    """Drop every cached page; called when the catalog snapshot changes."""
    global _generation
    with _lock:
        _generation += 1
        _entries.clear()


def get_cache_stats() -> dict:
    with _lock:
        size = len(_entries)
        hits, misses, evictions = _stats["hits"], _stats["misses"], _stats["evictions"]
    total = hits + misses
    return {
        "size": size,
        "hits": hits,
        "misses": misses,
        "evictions": evictions,
        "hit_rate": round(hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    with _lock:
        _entries.clear()
        for name in _stats:
            _stats[name] = 0
