"""
Data models for arkfm core layer.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from ..config import CONFIG


class EntryKind(Enum):
    """Kind of a listed item."""
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"


def archive_suffix(name: str) -> Optional[str]:
    """Return the recognised archive suffix of ``name`` or None."""
    lowered = name.lower()
    for ext in CONFIG["ARCHIVE_EXTENSIONS"]:
        if lowered.endswith(ext):
            return ext
    return None


def _normalize_internal_path(internal_path: str) -> str:
    parts = [part for part in internal_path.replace("\\", "/").split("/") if part and part != "."]
    return "/".join(parts)


@dataclass(frozen=True)
class FileSystemAddress:
    """A real directory or file on the local filesystem."""
    path: str

    def __post_init__(self):
        object.__setattr__(self, "path", os.path.abspath(self.path))

    @property
    def name(self) -> str:
        return os.path.basename(self.path) or self.path

    def parent(self) -> Optional["FileSystemAddress"]:
        """Containing directory, or None at the filesystem root."""
        parent = os.path.dirname(self.path)
        if parent == self.path:
            return None
        return FileSystemAddress(parent)

    def child(self, name: str) -> "FileSystemAddress":
        return FileSystemAddress(os.path.join(self.path, name))

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class ArchiveAddress:
    """A coordinate inside an archive: base file plus slash-separated sub-path.

    ``internal_path`` never starts or ends with ``/``; the empty string is the
    archive root.
    """
    archive_file: str
    internal_path: str = ""

    def __post_init__(self):
        object.__setattr__(self, "archive_file", os.path.abspath(self.archive_file))
        object.__setattr__(self, "internal_path", _normalize_internal_path(self.internal_path))

    @property
    def is_root(self) -> bool:
        return self.internal_path == ""

    @property
    def name(self) -> str:
        if self.is_root:
            return os.path.basename(self.archive_file)
        return self.internal_path.rsplit("/", 1)[-1]

    @property
    def prefix(self) -> str:
        """Manifest prefix for members below this address."""
        return self.internal_path + "/" if self.internal_path else ""

    def parent(self) -> Union["ArchiveAddress", FileSystemAddress]:
        """One level up; from the archive root this leaves the archive."""
        if self.is_root:
            return FileSystemAddress(os.path.dirname(self.archive_file))
        head, _, _ = self.internal_path.rpartition("/")
        return ArchiveAddress(self.archive_file, head)

    def child(self, name: str) -> "ArchiveAddress":
        return ArchiveAddress(self.archive_file, self.prefix + name)

    def breadcrumbs(self) -> List[Tuple[str, "ArchiveAddress"]]:
        """(label, address) pairs from the archive root down to this address."""
        crumbs = [(os.path.basename(self.archive_file), ArchiveAddress(self.archive_file))]
        current = ""
        for part in self.internal_path.split("/") if self.internal_path else []:
            current = f"{current}/{part}" if current else part
            crumbs.append((part, ArchiveAddress(self.archive_file, current)))
        return crumbs

    def __str__(self) -> str:
        return f"{self.archive_file}:/{self.internal_path}"


PathAddress = Union[FileSystemAddress, ArchiveAddress]


def parse_address(text: str) -> PathAddress:
    """Parse ``/dir`` or ``/dir/file.zip:/inner/path`` into an address.

    A bare archive path stays a FileSystemAddress; the ``:`` separator after a
    recognised archive suffix is what selects the archive coordinate.
    """
    lowered = text.lower()
    for ext in CONFIG["ARCHIVE_EXTENSIONS"]:
        marker = lowered.find(ext + ":")
        if marker != -1:
            split_at = marker + len(ext)
            return ArchiveAddress(os.path.expanduser(text[:split_at]), text[split_at + 1:])
    return FileSystemAddress(os.path.expanduser(text))


@dataclass(frozen=True)
class Entry:
    """One listed item, an immutable snapshot taken at listing time."""
    name: str
    address: PathAddress
    kind: EntryKind
    size: int = 0
    modified_at: float = 0.0
    created_at: float = 0.0
    mode: Optional[int] = None
    owner: Optional[int] = None
    group: Optional[int] = None

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK

    @property
    def in_archive(self) -> bool:
        return isinstance(self.address, ArchiveAddress)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.name)[1].lower()

    @property
    def is_archive(self) -> bool:
        return not self.is_directory and archive_suffix(self.name) is not None

    @property
    def is_text(self) -> bool:
        return not self.is_directory and self.extension in CONFIG["TEXT_EXTENSIONS"]

    @property
    def permissions(self) -> Optional[str]:
        """Octal permission bits, e.g. ``"644"``."""
        if self.mode is None:
            return None
        return format(self.mode & 0o777, "o")
