"""
Back/forward navigation history for a pane.
"""

import logging
from typing import List, Tuple

from .errors import AtBoundary
from .models import PathAddress

logger = logging.getLogger(__name__)


class NavigationHistory:
    """Browser-style back/forward stack over addresses.

    The index always points at a valid entry. Recording a new address while
    behind the end discards the forward branch.
    """

    def __init__(self, initial: PathAddress):
        self._entries: List[PathAddress] = [initial]
        self._index = 0

    @property
    def current(self) -> PathAddress:
        return self._entries[self._index]

    @property
    def index(self) -> int:
        return self._index

    @property
    def entries(self) -> Tuple[PathAddress, ...]:
        return tuple(self._entries)

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, address: PathAddress) -> bool:
        """Append ``address`` after the current entry.

        Returns False when ``address`` equals the current entry (no-op).
        """
        if self._entries[self._index] == address:
            return False
        del self._entries[self._index + 1:]
        self._entries.append(address)
        self._index = len(self._entries) - 1
        logger.debug("History recorded %s (index %d)", address, self._index)
        return True

    def back(self) -> PathAddress:
        if not self.can_go_back:
            raise AtBoundary("Already at the oldest history entry")
        self._index -= 1
        return self._entries[self._index]

    def forward(self) -> PathAddress:
        if not self.can_go_forward:
            raise AtBoundary("Already at the newest history entry")
        self._index += 1
        return self._entries[self._index]
