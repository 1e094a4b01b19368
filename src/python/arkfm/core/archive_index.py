"""
Implicit directory tree over a flat archive manifest.

Archive tools report members as a flat list of paths and often omit explicit
directory entries. The index derives one directory level at a time by prefix
scanning, so no tree is ever materialised.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .errors import NotADirectory, NotFound
from .models import ArchiveAddress, Entry, EntryKind

logger = logging.getLogger(__name__)


@dataclass
class ArchiveChildren:
    """Immediate children of one archive directory, in manifest order."""
    files: List[Entry] = field(default_factory=list)
    directories: List[Entry] = field(default_factory=list)

    def entries(self) -> List[Entry]:
        return self.directories + self.files

    def __len__(self) -> int:
        return len(self.files) + len(self.directories)


def split_children(manifest: Iterable[str], internal_path: str):
    """Return (file_names, directory_names) directly below ``internal_path``.

    Both lists are deduplicated and keep first-appearance order. A name that
    is both a bare member and a prefix of other members is a directory; some
    tools (``unrar lb``) list directory members without a trailing ``/``.
    """
    prefix = internal_path + "/" if internal_path else ""
    files = {}
    directories = {}

    for member in manifest:
        if not member.startswith(prefix) or member == prefix:
            continue
        relative = member[len(prefix):]
        parts = relative.split("/")
        if len(parts) == 1:
            if parts[0]:
                files.setdefault(parts[0], None)
        elif parts[0]:
            directories.setdefault(parts[0], None)

    return [name for name in files if name not in directories], list(directories)


class ArchiveIndex:
    """Navigable view over one archive's manifest."""

    def __init__(self, archive_file: str, manifest: Sequence[str]):
        self.archive_file = archive_file
        self.manifest = list(manifest)

    def __len__(self) -> int:
        return len(self.manifest)

    def has_directory(self, internal_path: str) -> bool:
        """True when some member lives at or below ``internal_path``."""
        if not internal_path:
            return True
        prefix = internal_path + "/"
        return any(member.startswith(prefix) for member in self.manifest)

    def has_file(self, internal_path: str) -> bool:
        return internal_path in self.manifest

    def list_children(self, internal_path: str = "",
                      listed_at: Optional[float] = None) -> ArchiveChildren:
        """Build entries for the immediate children of ``internal_path``.

        Sizes are 0 and timestamps are the listing time: the manifest carries
        member names only.

        Raises:
            NotFound: ``internal_path`` names nothing in the archive.
            NotADirectory: ``internal_path`` names a file member.
        """
        base = ArchiveAddress(self.archive_file, internal_path)
        if not self.has_directory(base.internal_path):
            if self.has_file(base.internal_path):
                raise NotADirectory(f"Not a directory inside archive: {base}", base)
            raise NotFound(f"No such directory inside archive: {base}", base)

        stamp = time.time() if listed_at is None else listed_at
        file_names, dir_names = split_children(self.manifest, base.internal_path)
        logger.debug("Archive %s at '%s': %d files, %d directories",
                     self.archive_file, base.internal_path, len(file_names), len(dir_names))

        return ArchiveChildren(
            files=[self._entry(base, name, EntryKind.FILE, stamp) for name in file_names],
            directories=[self._entry(base, name, EntryKind.DIRECTORY, stamp) for name in dir_names],
        )

    @staticmethod
    def _entry(base: ArchiveAddress, name: str, kind: EntryKind, stamp: float) -> Entry:
        return Entry(
            name=name,
            address=base.child(name),
            kind=kind,
            size=0,
            modified_at=stamp,
            created_at=stamp,
        )


def list_children(archive_file: str, manifest: Sequence[str], internal_path: str = "",
                  listed_at: Optional[float] = None) -> ArchiveChildren:
    """Shortcut for ``ArchiveIndex(archive_file, manifest).list_children(internal_path)``."""
    return ArchiveIndex(archive_file, manifest).list_children(internal_path, listed_at)
