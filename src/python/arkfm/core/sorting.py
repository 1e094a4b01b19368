"""
Directory-first sorting of listings.
"""

import locale
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List

from ..config import CONFIG
from .models import Entry


class SortKey(str, Enum):
    NAME = "name"
    SIZE = "size"
    MODIFIED = "modified"
    CREATED = "created"
    TYPE = "type"


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


def _name_key(entry: Entry) -> str:
    return locale.strxfrm(entry.name.casefold())


def _type_key(entry: Entry) -> str:
    return locale.strxfrm(entry.extension)


_KEY_FUNCTIONS: Dict[SortKey, Callable[[Entry], Any]] = {
    SortKey.NAME: _name_key,
    SortKey.SIZE: lambda entry: entry.size,
    SortKey.MODIFIED: lambda entry: entry.modified_at,
    SortKey.CREATED: lambda entry: entry.created_at,
    SortKey.TYPE: _type_key,
}


def sort_entries(entries: Iterable[Entry], key: SortKey = SortKey.NAME,
                 direction: SortDirection = SortDirection.ASCENDING) -> List[Entry]:
    """Directories first, then files; each partition ordered by ``key``.

    ``direction`` flips the comparison inside each partition only. The sort is
    stable, so entries equal under ``key`` keep their input order.
    """
    key_function = _KEY_FUNCTIONS[SortKey(key)]
    descending = SortDirection(direction) is SortDirection.DESCENDING

    items = list(entries)
    directories = [entry for entry in items if entry.is_directory]
    files = [entry for entry in items if not entry.is_directory]

    return (sorted(directories, key=key_function, reverse=descending)
            + sorted(files, key=key_function, reverse=descending))


@dataclass
class SortPolicy:
    """Sort key and direction shared by the panes of a tab."""
    key: SortKey = SortKey(CONFIG["DEFAULT_SORT_KEY"])
    direction: SortDirection = SortDirection(CONFIG["DEFAULT_SORT_ORDER"])

    def apply(self, entries: Iterable[Entry]) -> List[Entry]:
        return sort_entries(entries, self.key, self.direction)

    def to_dict(self) -> Dict[str, str]:
        return {"sort_key": self.key.value, "sort_order": self.direction.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SortPolicy":
        return cls(
            key=SortKey(data.get("sort_key", CONFIG["DEFAULT_SORT_KEY"])),
            direction=SortDirection(data.get("sort_order", CONFIG["DEFAULT_SORT_ORDER"])),
        )
