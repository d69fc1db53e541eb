import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional

from app.config import settings


class PathCache:
    """
    In-process cache of rendered page payloads keyed by path.

    A path may hold several renderings (e.g. one per search query / page number),
    kept in least-recently-used order and capped at `max_variants`.
    revalidate_path(path) drops all of them and bumps the path's generation, so a
    render that started before the invalidation is returned but never stored.
    """

    def __init__(self, max_variants: Optional[int] = None):
        self.max_variants = max_variants or settings.PATH_CACHE_MAX_VARIANTS
        self._entries: Dict[str, "OrderedDict[Hashable, Any]"] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def generation(self, path: str) -> int:
        with self._lock:
            return self._generations.get(path, 0)

    def get(self, path: str, variant: Hashable = None) -> Optional[Any]:
        with self._lock:
            variants = self._entries.get(path)
            if not variants or variant not in variants:
                return None
            variants.move_to_end(variant)
            return variants[variant]

    def set(self, path: str, value: Any, variant: Hashable = None, generation: Optional[int] = None) -> bool:
        """Store a rendering; refused (False) if the path was revalidated since `generation`."""
        with self._lock:
            if generation is not None and generation != self._generations.get(path, 0):
                return False
            variants = self._entries.setdefault(path, OrderedDict())
            variants[variant] = value
            variants.move_to_end(variant)
            while len(variants) > self.max_variants:
                variants.popitem(last=False)
            return True

    def get_or_render(self, path: str, render: Callable[[], Any], variant: Hashable = None) -> Any:
        cached = self.get(path, variant)
        if cached is not None:
            return cached
        started = self.generation(path)
        value = render()
        self.set(path, value, variant, generation=started)
        return value

    def revalidate_path(self, path: str) -> None:
        with self._lock:
            self._entries.pop(path, None)
            self._generations[path] = self._generations.get(path, 0) + 1

    def is_cached(self, path: str) -> bool:
        with self._lock:
            return bool(self._entries.get(path))

    def variant_count(self, path: str) -> int:
        with self._lock:
            return len(self._entries.get(path, ()))


path_cache = PathCache()
