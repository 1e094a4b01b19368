"""
Selection model for the entries of one listing.
"""

from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from .models import PathAddress


class SelectionModel:
    """Single, multi and range selection over listed addresses.

    Insertion order is kept so the most recently selected address can anchor
    a range selection.
    """

    def __init__(self):
        self._selected: Dict[PathAddress, None] = {}

    def __contains__(self, address: PathAddress) -> bool:
        return address in self._selected

    def __iter__(self) -> Iterator[PathAddress]:
        return iter(list(self._selected))

    def __len__(self) -> int:
        return len(self._selected)

    @property
    def selected(self) -> Tuple[PathAddress, ...]:
        return tuple(self._selected)

    @property
    def anchor(self) -> Optional[PathAddress]:
        """Most recently selected address."""
        if not self._selected:
            return None
        return list(self._selected)[-1]

    def toggle(self, address: PathAddress):
        if address in self._selected:
            del self._selected[address]
        else:
            self._selected[address] = None

    def replace(self, address: PathAddress):
        self._selected.clear()
        self._selected[address] = None

    def extend_range(self, from_address: PathAddress, to_address: PathAddress,
                     ordered_visible: Sequence[PathAddress]):
        """Add every visible address between the two, inclusive.

        Falls back to selecting only ``to_address`` when either end is not
        visible.
        """
        visible = list(ordered_visible)
        try:
            start = visible.index(from_address)
            end = visible.index(to_address)
        except ValueError:
            self.replace(to_address)
            return

        if start > end:
            start, end = end, start
        for address in visible[start:end + 1]:
            self._selected.pop(address, None)
            self._selected[address] = None
        # Keep the clicked address as the newest anchor.
        self._selected.pop(to_address, None)
        self._selected[to_address] = None

    def clear(self):
        self._selected.clear()

    def retain(self, valid: Iterable[PathAddress]):
        """Drop addresses that are not in ``valid``."""
        keep = set(valid)
        for address in list(self._selected):
            if address not in keep:
                del self._selected[address]
