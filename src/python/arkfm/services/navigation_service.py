"""
Navigation service for arkfm.
Single entry point for location changes of a pane: fresh navigation, history
replay, going up, opening entries, places, and asynchronous requests.
"""

import logging
import os
import shlex
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from ..config import CONFIG
from ..core.errors import AtBoundary, ListError
from ..core.models import ArchiveAddress, Entry, FileSystemAddress, PathAddress
from ..core.pane import Pane, PaneMode
from .config_service import ConfigService
from .entry_lister import EntryLister
from .places import PlaceRegistry
from .shell_runner import ShellRunner

logger = logging.getLogger(__name__)

DEFAULT_APPS_KEY = "default_apps"


class OpenAction(Enum):
    """What activating an entry did."""
    NAVIGATED = "navigated"
    EDITING = "editing"
    LAUNCHED = "launched"
    IGNORED = "ignored"


class NavigationService(QObject):
    """Moves panes between addresses.

    Fresh navigation records history; replay (back, forward, refresh, closing
    the editor) never does. A failed listing leaves the pane untouched.
    """

    listing_changed = Signal(object)         # Pane
    navigation_failed = Signal(object, str)  # Pane, message
    editor_requested = Signal(object, str)   # Pane, file path

    def __init__(self, lister: Optional[EntryLister] = None,
                 places: Optional[PlaceRegistry] = None,
                 runner: Optional[ShellRunner] = None,
                 config_service: Optional[ConfigService] = None,
                 max_workers: int = CONFIG["NAVIGATION_WORKERS"]):
        super().__init__()
        self.lister = lister or EntryLister()
        self.config_service = config_service
        self.places = places or PlaceRegistry(config_service)
        self.runner = runner or ShellRunner()
        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        logger.debug("NavigationService initialized")

    def _load(self, pane: Pane, address: PathAddress, token: Optional[int] = None) -> bool:
        """List ``address`` and commit it to ``pane``; returns False if superseded."""
        if token is None:
            token = pane.begin_request()
        try:
            entries = self.lister.list(address, pane.manifests)
        except ListError as e:
            logger.info("Navigation to %s failed: %s", address, e.message)
            raise
        committed = pane.commit(address, entries, token)
        if committed:
            self.listing_changed.emit(pane)
        return committed

    def navigate(self, pane: Pane, address: PathAddress) -> List[Entry]:
        """Navigate ``pane`` to ``address`` and record it in history.

        Raises:
            ListError: the address could not be listed; the pane keeps its
                previous address, listing and history.
        """
        if self._load(pane, address) and pane.history is not None:
            pane.history.record(address)
        return pane.entries

    def replay(self, pane: Pane, address: PathAddress) -> List[Entry]:
        """Show ``address`` without touching history."""
        self._load(pane, address)
        return pane.entries

    def go_back(self, pane: Pane) -> Optional[List[Entry]]:
        """Replay the previous history entry; None at the oldest entry."""
        history = pane.history
        if history is None:
            return None
        try:
            address = history.back()
        except AtBoundary:
            logger.debug("go_back: already at the oldest entry")
            return None
        try:
            return self.replay(pane, address)
        except ListError:
            history.forward()
            raise

    def go_forward(self, pane: Pane) -> Optional[List[Entry]]:
        """Replay the next history entry; None at the newest entry."""
        history = pane.history
        if history is None:
            return None
        try:
            address = history.forward()
        except AtBoundary:
            logger.debug("go_forward: already at the newest entry")
            return None
        try:
            return self.replay(pane, address)
        except ListError:
            history.back()
            raise

    def go_up(self, pane: Pane) -> Optional[List[Entry]]:
        """One level up; from an archive root this exits to the archive's folder."""
        parent = pane.address.parent()
        if parent is None:
            return None
        return self.navigate(pane, parent)

    def go_to_place(self, pane: Pane, name: str) -> List[Entry]:
        return self.navigate(pane, self.places.resolve(name))

    def refresh(self, pane: Pane) -> List[Entry]:
        """Re-list the current address, re-reading any archive manifest."""
        if pane.mode is PaneMode.EDITING:
            return pane.entries
        if pane.archive_anchor is not None:
            pane.manifests.release(pane.archive_anchor)
        return self.replay(pane, pane.address)

    def open_entry(self, pane: Pane, entry: Entry) -> OpenAction:
        """Activate ``entry`` the way a double click does."""
        if isinstance(entry.address, ArchiveAddress):
            if entry.is_directory:
                self.navigate(pane, entry.address)
                return OpenAction.NAVIGATED
            logger.debug("Ignoring open of archive member %s", entry.address)
            return OpenAction.IGNORED

        path = entry.address.path
        if entry.is_directory or (entry.is_symlink and os.path.isdir(path)):
            self.navigate(pane, FileSystemAddress(path))
            return OpenAction.NAVIGATED
        if entry.is_archive:
            self.navigate(pane, ArchiveAddress(path))
            return OpenAction.NAVIGATED
        if entry.is_text:
            pane.start_editing(path)
            self.editor_requested.emit(pane, path)
            return OpenAction.EDITING

        self.runner.launch(self._open_command(entry) + [path], cwd=os.path.dirname(path))
        return OpenAction.LAUNCHED

    def _open_command(self, entry: Entry) -> List[str]:
        default_apps = {}
        if self.config_service is not None:
            default_apps = self.config_service.get_setting(DEFAULT_APPS_KEY, {}) or {}
        command = default_apps.get(entry.extension)
        if command:
            return shlex.split(command)
        return [CONFIG["OPEN_COMMAND"]]

    def set_default_app(self, extension: str, command: str):
        """Remember ``command`` as the opener for files with ``extension``."""
        if self.config_service is None:
            return
        apps = dict(self.config_service.get_setting(DEFAULT_APPS_KEY, {}) or {})
        ext = extension.lower() if extension.startswith(".") else "." + extension.lower()
        apps[ext] = command
        self.config_service.set_setting(DEFAULT_APPS_KEY, apps)
        self.config_service.save_settings()

    def close_editor(self, pane: Pane) -> List[Entry]:
        """Leave editor mode and show the last filesystem address again."""
        return self.replay(pane, pane.stop_editing())

    def request_navigation(self, pane: Pane, address: PathAddress, record: bool = True) -> Future:
        """Navigate on a worker thread.

        Only the newest request of a pane may commit; an older request that
        finishes later is discarded. The future resolves to True when the
        listing was committed.
        """
        token = pane.begin_request()

        def work() -> bool:
            try:
                committed = self._load(pane, address, token)
            except ListError as e:
                if pane.is_current_request(token):
                    self.navigation_failed.emit(pane, e.message)
                raise
            if committed and record and pane.history is not None:
                pane.history.record(address)
            return committed

        return self.executor.submit(work)

    def shutdown(self):
        self.executor.shutdown(wait=True)
