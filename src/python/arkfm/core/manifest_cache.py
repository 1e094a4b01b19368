"""
Manifest cache for arkfm core layer.
Keeps archive manifests for the duration of a browsing session in a pane.
"""

import os
import threading
from collections import OrderedDict
from typing import Callable, List, Optional

from ..config import CONFIG


class ManifestCache:
    """LRU cache of archive member lists keyed by absolute archive path.

    Each pane owns its own cache, so panes browsing the same archive never
    share an in-progress fetch.
    """
    def __init__(self, max_archives: int = CONFIG["MANIFEST_CACHE_SIZE"]):
        self._manifests: OrderedDict = OrderedDict()
        self._lock = threading.Lock()
        self._max_archives = max_archives

    def get(self, archive_file: str) -> Optional[List[str]]:
        """Get a cached manifest, marking it most recently used."""
        key = os.path.abspath(archive_file)
        with self._lock:
            if key not in self._manifests:
                return None
            self._manifests.move_to_end(key)
            return self._manifests[key]

    def put(self, archive_file: str, manifest: List[str]):
        key = os.path.abspath(archive_file)
        with self._lock:
            self._manifests[key] = list(manifest)
            self._manifests.move_to_end(key)
            while len(self._manifests) > self._max_archives:
                self._manifests.popitem(last=False)

    def get_or_fetch(self, archive_file: str, fetch: Callable[[str], List[str]]) -> List[str]:
        """Return the cached manifest or fetch and store it.

        The fetch runs outside the lock; a failing fetch stores nothing.
        """
        cached = self.get(archive_file)
        if cached is not None:
            return cached
        manifest = fetch(archive_file)
        self.put(archive_file, manifest)
        return self.get(archive_file) or []

    def release(self, archive_file: str):
        """Forget one archive's manifest (refresh re-fetches it)."""
        with self._lock:
            self._manifests.pop(os.path.abspath(archive_file), None)

    def clear(self):
        with self._lock:
            self._manifests.clear()

    def __contains__(self, archive_file: str) -> bool:
        with self._lock:
            return os.path.abspath(archive_file) in self._manifests

    def __len__(self) -> int:
        with self._lock:
            return len(self._manifests)
