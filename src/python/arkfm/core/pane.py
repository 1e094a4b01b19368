"""
Pane: one browsing viewport with its location, listing, selection and history.
"""

import logging
import os
import threading
from enum import Enum
from typing import List, Optional

from .errors import OperationNotSupported
from .history import NavigationHistory
from .manifest_cache import ManifestCache
from .models import ArchiveAddress, Entry, FileSystemAddress, PathAddress
from .selection import SelectionModel
from .sorting import SortPolicy

logger = logging.getLogger(__name__)


class PaneMode(Enum):
    BROWSING = "browsing"
    BROWSING_ARCHIVE = "browsing_archive"
    EDITING = "editing"


class Pane:
    """Mutable browsing state for one viewport.

    A pane only changes location through ``commit``, which swaps address and
    listing together, so a failed navigation leaves the previous state intact.
    """

    def __init__(self, address: PathAddress, sort_policy: Optional[SortPolicy] = None,
                 track_history: bool = True):
        self.address: PathAddress = address
        self.sort_policy = sort_policy or SortPolicy()
        self.selection = SelectionModel()
        self.entries: List[Entry] = []
        self.history: Optional[NavigationHistory] = NavigationHistory(address) if track_history else None
        self.manifests = ManifestCache()
        self.editing_file: Optional[str] = None
        self.last_filesystem_address: FileSystemAddress = self.directory
        self._request_serial = 0
        self._lock = threading.Lock()

    @property
    def mode(self) -> PaneMode:
        if self.editing_file is not None:
            return PaneMode.EDITING
        if isinstance(self.address, ArchiveAddress):
            return PaneMode.BROWSING_ARCHIVE
        return PaneMode.BROWSING

    @property
    def in_archive(self) -> bool:
        return isinstance(self.address, ArchiveAddress)

    @property
    def archive_anchor(self) -> Optional[str]:
        """Archive file being browsed, independent of the internal depth."""
        if isinstance(self.address, ArchiveAddress):
            return self.address.archive_file
        return None

    @property
    def directory(self) -> FileSystemAddress:
        """Filesystem directory this pane is in (the archive's folder when inside one)."""
        if isinstance(self.address, FileSystemAddress):
            return self.address
        return FileSystemAddress(os.path.dirname(self.address.archive_file))

    def begin_request(self) -> int:
        """Start a navigation request; newer requests supersede older ones."""
        with self._lock:
            self._request_serial += 1
            return self._request_serial

    def is_current_request(self, token: int) -> bool:
        with self._lock:
            return token == self._request_serial

    def commit(self, address: PathAddress, entries: List[Entry],
               token: Optional[int] = None) -> bool:
        """Install a new location and its listing.

        Returns False, changing nothing, when ``token`` belongs to a
        superseded request.
        """
        with self._lock:
            if token is not None and token != self._request_serial:
                logger.warning("Discarding stale listing for %s", address)
                return False
            previous_anchor = self.archive_anchor
            self.address = address
            self.entries = self.sort_policy.apply(entries)
            self.selection.clear()
            self.editing_file = None
            if isinstance(address, FileSystemAddress):
                self.last_filesystem_address = address
                if previous_anchor is not None:
                    self.manifests.release(previous_anchor)
            elif previous_anchor is not None and previous_anchor != address.archive_file:
                self.manifests.release(previous_anchor)
        logger.debug("Pane now at %s (%d entries)", address, len(self.entries))
        return True

    def resort(self):
        """Re-apply the sort policy to the current listing."""
        with self._lock:
            self.entries = self.sort_policy.apply(self.entries)

    def start_editing(self, file_path: str):
        """Enter text-editor mode for a filesystem file."""
        if self.in_archive:
            raise OperationNotSupported("Files inside an archive cannot be edited", self.address)
        self.editing_file = os.path.abspath(file_path)
        logger.debug("Pane editing %s", self.editing_file)

    def stop_editing(self) -> FileSystemAddress:
        """Leave editor mode; returns the address to show again."""
        self.editing_file = None
        return self.last_filesystem_address

    def visible_addresses(self) -> List[PathAddress]:
        return [entry.address for entry in self.entries]

    def entry_for(self, address: PathAddress) -> Optional[Entry]:
        for entry in self.entries:
            if entry.address == address:
                return entry
        return None

    def selected_entries(self) -> List[Entry]:
        """Selected entries in visible order."""
        return [entry for entry in self.entries if entry.address in self.selection]
