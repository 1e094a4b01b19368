"""
Name search over the current listing and below the current directory.
"""

import logging
import os
from typing import List, Optional

from ..config import CONFIG
from ..core.models import Entry, FileSystemAddress
from ..core.pane import Pane
from .entry_lister import entry_from_stat

logger = logging.getLogger(__name__)


class SearchService:
    """Case-insensitive substring search on entry names."""

    def __init__(self, limit: int = CONFIG["DEEP_SEARCH_LIMIT"]):
        self.limit = limit

    @staticmethod
    def quick_search(pane: Pane, query: str) -> List[Entry]:
        """Entries of the pane's current listing whose name contains ``query``."""
        needle = query.strip().casefold()
        if not needle:
            return list(pane.entries)
        return [entry for entry in pane.entries if needle in entry.name.casefold()]

    def deep_search(self, root: FileSystemAddress, query: str,
                    limit: Optional[int] = None) -> List[Entry]:
        """Walk below ``root`` collecting matching entries, up to ``limit``."""
        needle = query.strip().casefold()
        if not needle:
            return []
        limit = self.limit if limit is None else limit
        results: List[Entry] = []

        def on_error(error: OSError):
            logger.debug("Search skipped %s: %s", error.filename, error)

        for dirpath, dirnames, filenames in os.walk(root.path, onerror=on_error):
            dirnames.sort()
            for name in dirnames + sorted(filenames):
                if needle not in name.casefold():
                    continue
                address = FileSystemAddress(os.path.join(dirpath, name))
                try:
                    results.append(entry_from_stat(name, address, os.lstat(address.path)))
                except OSError as e:
                    logger.debug("Search skipped %s: %s", address.path, e)
                    continue
                if len(results) >= limit:
                    return results
        return results
