"""
Entry lister: turns an address into the entries to display.
"""

import logging
import os
import stat
import time
from typing import Callable, List, Optional

from ..core.archive_index import ArchiveIndex
from ..core.errors import (
    EntryVanished,
    OperationNotSupported,
    UnsupportedArchiveFormat,
    error_from_os,
)
from ..core.manifest_cache import ManifestCache
from ..core.models import ArchiveAddress, Entry, EntryKind, FileSystemAddress, PathAddress
from .archive_tool import ArchiveTool, is_archive

logger = logging.getLogger(__name__)


def _created_at(stat_result: os.stat_result) -> float:
    return getattr(stat_result, "st_birthtime", stat_result.st_ctime)


def entry_from_stat(name: str, address: FileSystemAddress, stat_result: os.stat_result) -> Entry:
    """Build an Entry from an ``lstat`` result."""
    if stat.S_ISLNK(stat_result.st_mode):
        kind = EntryKind.SYMLINK
    elif stat.S_ISDIR(stat_result.st_mode):
        kind = EntryKind.DIRECTORY
    else:
        kind = EntryKind.FILE
    return Entry(
        name=name,
        address=address,
        kind=kind,
        size=stat_result.st_size,
        modified_at=stat_result.st_mtime,
        created_at=_created_at(stat_result),
        mode=stat_result.st_mode,
        owner=stat_result.st_uid,
        group=stat_result.st_gid,
    )


class EntryLister:
    """Lists filesystem directories and archive directories alike.

    Filesystem listings are never cached here; archive manifests are cached
    only in a ManifestCache supplied by the caller.
    """

    def __init__(self, archive_tool: Optional[ArchiveTool] = None,
                 clock: Callable[[], float] = time.time):
        self.archive_tool = archive_tool or ArchiveTool()
        self.clock = clock

    def list(self, address: PathAddress, manifest_cache: Optional[ManifestCache] = None) -> List[Entry]:
        """Unsorted entries directly inside ``address``.

        Raises:
            ListError: one of NotFound, PermissionDenied, NotADirectory,
                UnsupportedArchiveFormat, ArchiveUnreadable.
        """
        if isinstance(address, ArchiveAddress):
            return self._list_archive(address, manifest_cache)
        return self._list_directory(address)

    def _list_directory(self, address: FileSystemAddress) -> List[Entry]:
        path = address.path
        # listdir reports the real cause (EACCES on a parent, dangling link).
        try:
            names = os.listdir(path)
        except OSError as e:
            raise error_from_os(e, address) from e

        entries: List[Entry] = []
        for name in names:
            child = address.child(name)
            try:
                entries.append(entry_from_stat(name, child, os.lstat(child.path)))
            except OSError as e:
                # One unreadable child must not fail the listing.
                logger.warning("Skipping %s: %s", child.path, e)
        return entries

    def fetch_manifest(self, archive_file: str,
                       manifest_cache: Optional[ManifestCache] = None) -> List[str]:
        if not is_archive(archive_file):
            raise UnsupportedArchiveFormat(f"Not a supported archive: {archive_file}", archive_file)
        if manifest_cache is None:
            return self.archive_tool.list_members(archive_file)
        return manifest_cache.get_or_fetch(archive_file, self.archive_tool.list_members)

    def _list_archive(self, address: ArchiveAddress,
                      manifest_cache: Optional[ManifestCache]) -> List[Entry]:
        manifest = self.fetch_manifest(address.archive_file, manifest_cache)
        index = ArchiveIndex(address.archive_file, manifest)
        return index.list_children(address.internal_path, listed_at=self.clock()).entries()

    def stat_entry(self, address: PathAddress) -> Entry:
        """Fresh snapshot of one filesystem entry.

        Raises:
            EntryVanished: the entry no longer exists.
        """
        if isinstance(address, ArchiveAddress):
            raise OperationNotSupported("Archive members carry no file status", address)
        try:
            return entry_from_stat(address.name, address, os.lstat(address.path))
        except FileNotFoundError as e:
            raise EntryVanished(f"{address.path} no longer exists", address) from e
        except OSError as e:
            raise error_from_os(e, address) from e
