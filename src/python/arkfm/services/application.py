"""
Application service - owns the tabs and coordinates navigation, selection,
sorting and file operations for the UI layer.
"""

import logging
import os
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from PySide6.QtCore import QObject, Signal, Slot

from ..config import CONFIG, parse_human_size
from ..core.errors import EntryVanished, FileManagerError, ListError, OperationNotSupported
from ..core.models import ArchiveAddress, Entry, FileSystemAddress, PathAddress
from ..core.pane import Pane
from ..core.sorting import SortDirection, SortKey, SortPolicy
from ..core.tab import Tab, ViewMode
from .archive_tool import ArchiveFormat, ArchiveTool
from .config_service import ConfigService
from .entry_lister import EntryLister
from .file_operations import FileOperationsService, OperationResult
from .navigation_service import NavigationService
from .places import PlaceRegistry
from .search_service import SearchService
from .tag_service import TagService

logger = logging.getLogger(__name__)


class SelectModifier(Enum):
    """Modifier held while clicking an entry."""
    NONE = "none"      # plain click
    TOGGLE = "toggle"  # ctrl
    RANGE = "range"    # shift


class ApplicationService(QObject):
    """Main application service that coordinates all browsing operations."""

    # UI Signals
    update_status = Signal(str)
    show_error = Signal(str, str)

    # Data Signals
    tabs_changed = Signal()
    active_tab_changed = Signal(object)  # Tab
    listing_changed = Signal(object)     # Pane

    def __init__(self, config_service: Optional[ConfigService] = None,
                 navigation: Optional[NavigationService] = None,
                 archive_tool: Optional[ArchiveTool] = None,
                 places: Optional[PlaceRegistry] = None):
        super().__init__()
        self.config_service = config_service or ConfigService()
        self.archive_tool = archive_tool or ArchiveTool()
        self.places = places or PlaceRegistry(self.config_service)
        self.navigation = navigation or NavigationService(
            lister=EntryLister(self.archive_tool),
            places=self.places,
            config_service=self.config_service,
        )
        self.file_operations = FileOperationsService()
        self.tags = TagService(self.config_service)
        self.search_service = SearchService()

        self.tabs: List[Tab] = []
        self.active_tab_id: Optional[int] = None

        self.navigation.listing_changed.connect(self._on_listing_changed)
        self.navigation.navigation_failed.connect(self._on_navigation_failed)

    @Slot(object)
    def _on_listing_changed(self, pane: Pane):
        self.listing_changed.emit(pane)

    @Slot(object, str)
    def _on_navigation_failed(self, pane: Pane, message: str):
        self.show_error.emit("Navigation Error", message)

    # Tabs

    @property
    def active_tab(self) -> Optional[Tab]:
        for tab in self.tabs:
            if tab.id == self.active_tab_id:
                return tab
        return None

    def get_tab(self, tab_id: int) -> Tab:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        raise KeyError(f"No tab with id {tab_id}")

    def create_tab(self, address: Optional[PathAddress] = None) -> Tab:
        """Open a new tab at ``address`` (home by default) and activate it."""
        address = address or self.places.home
        tab = Tab(
            address,
            sort_policy=SortPolicy.from_dict(self.config_service.get_all_settings()),
            view_mode=ViewMode(self.config_service.get_setting("view_mode", CONFIG["DEFAULT_VIEW_MODE"])),
        )
        self.tabs.append(tab)
        self.active_tab_id = tab.id
        self._navigate_reporting(tab.primary_pane, address)
        self.tabs_changed.emit()
        self.active_tab_changed.emit(tab)
        return tab

    def close_tab(self, tab_id: int) -> bool:
        """Close a tab; the last remaining tab cannot be closed."""
        index = next((i for i, tab in enumerate(self.tabs) if tab.id == tab_id), -1)
        if index == -1 or len(self.tabs) == 1:
            return False

        closed = self.tabs.pop(index)
        for pane in closed.panes:
            pane.manifests.clear()
        if self.active_tab_id == tab_id:
            self.active_tab_id = self.tabs[max(0, index - 1)].id
            self.active_tab_changed.emit(self.active_tab)
        self.tabs_changed.emit()
        return True

    def set_active_tab(self, tab_id: int):
        tab = self.get_tab(tab_id)
        self.active_tab_id = tab.id
        self.active_tab_changed.emit(tab)

    def toggle_split(self, tab: Tab) -> bool:
        """Toggle split view; returns the new split state."""
        if tab.toggle_split():
            secondary = tab.secondary_pane
            self._navigate_reporting(secondary, secondary.address)
        return tab.split_view

    def set_view_mode(self, tab: Tab, mode: ViewMode):
        tab.view_mode = ViewMode(mode)
        self._persist({"view_mode": tab.view_mode.value})

    def toggle_view_mode(self, tab: Tab) -> ViewMode:
        mode = tab.toggle_view_mode()
        self._persist({"view_mode": mode.value})
        return mode

    # Navigation helpers

    def _navigate_reporting(self, pane: Pane, address: PathAddress) -> bool:
        try:
            self.navigation.navigate(pane, address)
            return True
        except ListError as e:
            self.show_error.emit("Navigation Error", e.message)
            return False

    def refresh_tab(self, tab: Tab):
        """Re-list every visible pane of ``tab``."""
        for pane in tab.visible_panes:
            try:
                self.navigation.refresh(pane)
            except ListError as e:
                self.show_error.emit("Refresh Error", e.message)

    # Sorting

    def sort_query(self, tab: Tab) -> Tuple[SortKey, SortDirection]:
        return tab.sort_policy.key, tab.sort_policy.direction

    def set_sorting(self, tab: Tab, key: SortKey, direction: SortDirection):
        """Change the tab's sort order and re-sort its panes in place."""
        tab.sort_policy.key = SortKey(key)
        tab.sort_policy.direction = SortDirection(direction)
        for pane in tab.panes:
            pane.resort()
            self.listing_changed.emit(pane)
        self._persist(tab.sort_policy.to_dict())

    def _persist(self, values: dict):
        self.config_service.update_settings(values)
        self.config_service.save_settings()

    # Selection

    def selection_query(self, pane: Pane) -> List[Entry]:
        return pane.selected_entries()

    def select(self, pane: Pane, entry: Entry, modifier: SelectModifier = SelectModifier.NONE):
        """Apply a click on ``entry`` with the given modifier."""
        selection = pane.selection
        if modifier is SelectModifier.TOGGLE:
            selection.toggle(entry.address)
        elif modifier is SelectModifier.RANGE and len(selection) > 0:
            selection.extend_range(selection.anchor, entry.address, pane.visible_addresses())
        else:
            selection.replace(entry.address)
        self.update_status.emit(self.status_text(pane))

    def clear_selection(self, pane: Pane):
        pane.selection.clear()
        self.update_status.emit(self.status_text(pane))

    def status_text(self, pane: Pane) -> str:
        """Selection summary, with details for a single filesystem entry."""
        count = len(pane.selection)
        if count == 0:
            return "No items selected"
        if count > 1:
            return f"{count} items selected"

        summary = "1 item selected"
        address = pane.selection.selected[0]
        try:
            entry = self.navigation.lister.stat_entry(address)
        except EntryVanished as e:
            logger.warning("Selected entry vanished: %s", e.message)
            return f"{summary} | {address.name} no longer exists"
        except (OperationNotSupported, ListError):
            return summary

        details = [
            summary,
            f"Size: {parse_human_size(entry.size)}",
            f"Perms: {entry.permissions}",
            f"Owner: {entry.owner}:{entry.group}",
            f"Created: {datetime.fromtimestamp(entry.created_at):%Y-%m-%d}",
            f"Modified: {datetime.fromtimestamp(entry.modified_at):%Y-%m-%d}",
        ]
        return " | ".join(details)

    # Search

    def search(self, pane: Pane, query: str) -> List[Entry]:
        """Filter the pane's listing; an empty query refreshes it."""
        if not query.strip():
            return self.navigation.refresh(pane)
        return self.search_service.quick_search(pane, query)

    def deep_search(self, pane: Pane, query: str) -> List[Entry]:
        return self.search_service.deep_search(pane.directory, query)

    # File operations

    def _report(self, results: List[OperationResult], title: str) -> List[OperationResult]:
        for result in results:
            if not result.success:
                self.show_error.emit(title, f"{os.path.basename(result.source)}: {result.error_message}")
        return results

    def copy_selection(self, pane: Pane):
        self.file_operations.copy_to_clipboard(pane.selection.selected)

    def cut_selection(self, pane: Pane):
        self.file_operations.cut_to_clipboard(pane.selection.selected)

    def paste(self, pane: Pane) -> List[OperationResult]:
        results = self.file_operations.paste(pane.address)
        self._refresh_reporting(pane)
        return self._report(results, "Paste Error")

    def delete_selection(self, pane: Pane) -> List[OperationResult]:
        results = self.file_operations.delete_entries(pane.selection.selected)
        self._refresh_reporting(pane)
        return self._report(results, "Delete Error")

    def rename(self, pane: Pane, entry: Entry, new_name: str) -> Optional[FileSystemAddress]:
        try:
            renamed = self.file_operations.rename(entry.address, new_name)
        except (OSError, ValueError, FileManagerError) as e:
            self.show_error.emit("Rename Error", str(e))
            return None
        self._refresh_reporting(pane)
        return renamed

    def create_folder(self, pane: Pane, name: str) -> Optional[FileSystemAddress]:
        try:
            created = self.file_operations.create_folder(pane.address, name)
        except (OSError, FileManagerError) as e:
            self.show_error.emit("Create Folder Error", str(e))
            return None
        self._refresh_reporting(pane)
        return created

    def _refresh_reporting(self, pane: Pane):
        try:
            self.navigation.refresh(pane)
        except ListError as e:
            self.show_error.emit("Refresh Error", e.message)

    def tag_entry(self, entry: Entry, color: Optional[str]):
        if isinstance(entry.address, ArchiveAddress):
            raise OperationNotSupported("Archive members cannot be tagged", entry.address)
        self.tags.set_tag(entry.address.path, color)

    # Archives

    def extract_archive(self, pane: Pane, target_dir: Optional[str] = None) -> str:
        """Extract the archive the pane is browsing (or the selected archive).

        Without ``target_dir`` the archive is extracted next to itself.
        """
        archive_file = pane.archive_anchor
        if archive_file is None:
            archives = [entry for entry in pane.selected_entries() if entry.is_archive]
            if not archives:
                raise OperationNotSupported("No archive to extract", pane.address)
            archive_file = archives[0].address.path
        if target_dir is None:
            target = self.archive_tool.extract_here(archive_file)
        else:
            target = self.archive_tool.extract(archive_file, target_dir)
        self.update_status.emit(f"Extracted {os.path.basename(archive_file)}")
        if not pane.in_archive:
            self._refresh_reporting(pane)
        return target

    def compress_selection(self, pane: Pane, name: str,
                           fmt: ArchiveFormat = ArchiveFormat.ZIP) -> str:
        """Pack the selected entries into ``name.<fmt>`` in the pane's directory."""
        if pane.in_archive:
            raise OperationNotSupported("Cannot compress inside an archive", pane.address)
        sources = [entry.address.path for entry in pane.selected_entries()]
        if not sources:
            raise OperationNotSupported("Nothing selected to compress", pane.address)
        fmt = ArchiveFormat(fmt)
        archive_path = os.path.join(pane.directory.path, f"{name or 'archive'}.{fmt.value}")
        self.archive_tool.create(archive_path, sources, fmt)
        self._refresh_reporting(pane)
        return archive_path

    def cleanup(self):
        """Release worker threads and cached manifests."""
        self.navigation.shutdown()
        for tab in self.tabs:
            for pane in tab.panes:
                pane.manifests.clear()
