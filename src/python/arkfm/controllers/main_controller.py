"""
Main application controller - coordinates between a view and the services.
"""

from typing import Any, Optional

from PySide6.QtCore import QObject, Slot

from ..core.errors import ListError
from ..core.models import Entry, PathAddress
from ..core.pane import Pane
from ..core.tab import Tab
from ..services import ApplicationService, OpenAction, SelectModifier


class MainController(QObject):
    """Forwards service signals to whatever handlers the view implements."""

    def __init__(self, view: Any, app_service: Optional[ApplicationService] = None):
        super().__init__()
        self.view = view
        self.app_service = app_service or ApplicationService()
        self._connect_service_signals()

    def _connect_service_signals(self):
        """Connect application service signals to controller handlers."""
        self.app_service.update_status.connect(self._on_update_status)
        self.app_service.show_error.connect(self._on_show_error)
        self.app_service.listing_changed.connect(self._on_listing_changed)
        self.app_service.active_tab_changed.connect(self._on_active_tab_changed)
        self.app_service.navigation.editor_requested.connect(self._on_editor_requested)

    def get_app_service(self) -> ApplicationService:
        return self.app_service

    @property
    def active_pane(self) -> Optional[Pane]:
        tab = self.app_service.active_tab
        return tab.active_pane if tab else None

    # Service proxy methods
    def open_tab(self, address: Optional[PathAddress] = None) -> Tab:
        return self.app_service.create_tab(address)

    def navigate(self, address: PathAddress) -> bool:
        """Navigate the active pane; errors are reported to the view."""
        try:
            self.app_service.navigation.navigate(self.active_pane, address)
            return True
        except ListError as e:
            self._on_show_error("Navigation Error", e.message)
            return False

    def activate(self, entry: Entry) -> Optional[OpenAction]:
        try:
            return self.app_service.navigation.open_entry(self.active_pane, entry)
        except ListError as e:
            self._on_show_error("Navigation Error", e.message)
            return None

    def click(self, entry: Entry, ctrl: bool = False, shift: bool = False):
        if ctrl:
            modifier = SelectModifier.TOGGLE
        elif shift:
            modifier = SelectModifier.RANGE
        else:
            modifier = SelectModifier.NONE
        self.app_service.select(self.active_pane, entry, modifier)

    def back(self):
        self._guarded(self.app_service.navigation.go_back)

    def forward(self):
        self._guarded(self.app_service.navigation.go_forward)

    def up(self):
        self._guarded(self.app_service.navigation.go_up)

    def _guarded(self, action):
        try:
            action(self.active_pane)
        except ListError as e:
            self._on_show_error("Navigation Error", e.message)

    def cleanup(self):
        self.app_service.cleanup()

    # Signal handlers
    @Slot(str)
    def _on_update_status(self, message: str):
        if hasattr(self.view, 'on_update_status'):
            self.view.on_update_status(message)

    @Slot(str, str)
    def _on_show_error(self, title: str, message: str):
        if hasattr(self.view, 'on_show_error'):
            self.view.on_show_error(title, message)

    @Slot(object)
    def _on_listing_changed(self, pane: Pane):
        if hasattr(self.view, 'on_listing_changed'):
            self.view.on_listing_changed(pane)

    @Slot(object)
    def _on_active_tab_changed(self, tab: Tab):
        if hasattr(self.view, 'on_active_tab_changed'):
            self.view.on_active_tab_changed(tab)

    @Slot(object, str)
    def _on_editor_requested(self, pane: Pane, path: str):
        if hasattr(self.view, 'on_editor_requested'):
            self.view.on_editor_requested(pane, path)
