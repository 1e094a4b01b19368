"""
Core package for arkfm.
"""

from .models import (
    ArchiveAddress,
    Entry,
    EntryKind,
    FileSystemAddress,
    PathAddress,
    archive_suffix,
    parse_address,
)
from .errors import (
    ArchiveUnreadable,
    AtBoundary,
    EntryVanished,
    FileManagerError,
    ListError,
    NotADirectory,
    NotFound,
    OperationNotSupported,
    PermissionDenied,
    ShellCommandError,
    UnsupportedArchiveFormat,
)
from .archive_index import ArchiveChildren, ArchiveIndex, list_children
from .history import NavigationHistory
from .selection import SelectionModel
from .sorting import SortDirection, SortKey, SortPolicy, sort_entries
from .manifest_cache import ManifestCache
from .pane import Pane, PaneMode
from .tab import Tab, ViewMode

__all__ = [
    'ArchiveAddress',
    'Entry',
    'EntryKind',
    'FileSystemAddress',
    'PathAddress',
    'archive_suffix',
    'parse_address',
    'ArchiveUnreadable',
    'AtBoundary',
    'EntryVanished',
    'FileManagerError',
    'ListError',
    'NotADirectory',
    'NotFound',
    'OperationNotSupported',
    'PermissionDenied',
    'ShellCommandError',
    'UnsupportedArchiveFormat',
    'ArchiveChildren',
    'ArchiveIndex',
    'list_children',
    'NavigationHistory',
    'SelectionModel',
    'SortDirection',
    'SortKey',
    'SortPolicy',
    'sort_entries',
    'ManifestCache',
    'Pane',
    'PaneMode',
    'Tab',
    'ViewMode',
]
