"""
Tab: one or two panes sharing a sort policy and view mode.
"""

import itertools
from enum import Enum
from typing import List, Optional

from ..config import CONFIG
from .models import PathAddress
from .pane import Pane
from .sorting import SortPolicy

_tab_ids = itertools.count()


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"


class Tab:
    """A browsing tab.

    Only the primary pane keeps navigation history; the secondary pane of a
    split view navigates without it.
    """

    def __init__(self, address: PathAddress, sort_policy: Optional[SortPolicy] = None,
                 view_mode: ViewMode = ViewMode(CONFIG["DEFAULT_VIEW_MODE"])):
        self.id = next(_tab_ids)
        self.sort_policy = sort_policy or SortPolicy()
        self.view_mode = ViewMode(view_mode)
        self.split_view = False
        self.active_pane_index = 0
        self.panes: List[Pane] = [Pane(address, self.sort_policy, track_history=True)]

    @property
    def primary_pane(self) -> Pane:
        return self.panes[0]

    @property
    def secondary_pane(self) -> Optional[Pane]:
        return self.panes[1] if len(self.panes) > 1 else None

    @property
    def visible_panes(self) -> List[Pane]:
        return self.panes if self.split_view else self.panes[:1]

    @property
    def active_pane(self) -> Pane:
        return self.visible_panes[min(self.active_pane_index, len(self.visible_panes) - 1)]

    @property
    def title(self) -> str:
        return self.primary_pane.address.name

    def activate_pane(self, index: int):
        if not 0 <= index < len(self.visible_panes):
            raise IndexError(f"No visible pane at index {index}")
        self.active_pane_index = index

    def toggle_split(self) -> bool:
        """Flip split view; returns True when a new secondary pane was created."""
        self.split_view = not self.split_view
        created = False
        if self.split_view and len(self.panes) == 1:
            self.panes.append(Pane(self.primary_pane.last_filesystem_address,
                                   self.sort_policy, track_history=False))
            created = True
        if not self.split_view:
            self.active_pane_index = 0
        return created

    def toggle_view_mode(self) -> ViewMode:
        self.view_mode = ViewMode.LIST if self.view_mode is ViewMode.GRID else ViewMode.GRID
        return self.view_mode
