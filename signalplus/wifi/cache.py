"""
Process-wide cache of the newest generation each access point advertises.

The mapping is rebuilt from every 'iw scan dump' and swapped in as a whole.
An empty parse is treated as a transient failure and never replaces known
data.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Mapping, Optional

from .models import WifiGeneration

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, WifiGeneration] = MappingProxyType({})


class GenerationCache:
    """
    BSSID -> WifiGeneration snapshot.

    Readers always see one complete snapshot; the writer replaces the
    snapshot reference under a lock and never mutates it in place.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generations: Mapping[str, WifiGeneration] = _EMPTY

    def update(self, generations: Mapping[str, WifiGeneration]) -> bool:
        """
        Replace the cached mapping.

        Args:
            generations: Freshly parsed BSSID -> generation mapping.

        Returns:
            True if the cache was replaced, False if the mapping was empty
            and the previous data was kept.
        """
        if not generations:
            logger.debug("Empty scan dump, keeping previous generation cache")
            return False

        snapshot = MappingProxyType({
            bssid.lower(): generation for bssid, generation in generations.items()
        })

        with self._lock:
            self._generations = snapshot

        logger.debug(f"Generation cache updated with {len(snapshot)} entries")
        return True

    def get(self, bssid: str) -> WifiGeneration:
        """Last known generation for a BSSID, UNKNOWN if never observed."""
        return self.snapshot().get(bssid.lower(), WifiGeneration.UNKNOWN)

    def snapshot(self) -> Mapping[str, WifiGeneration]:
        """Current read-only mapping."""
        with self._lock:
            return self._generations

    def clear(self) -> None:
        with self._lock:
            self._generations = _EMPTY

    def __len__(self) -> int:
        return len(self.snapshot())


# Module-level instance for shared access
_generation_cache: Optional[GenerationCache] = None
_cache_lock = threading.Lock()


def get_generation_cache() -> GenerationCache:
    """Get or create the shared generation cache."""
    global _generation_cache
    with _cache_lock:
        if _generation_cache is None:
            _generation_cache = GenerationCache()
        return _generation_cache


def reset_generation_cache() -> None:
    """Reset the shared generation cache."""
    global _generation_cache
    with _cache_lock:
        if _generation_cache is not None:
            _generation_cache.clear()
        _generation_cache = None
