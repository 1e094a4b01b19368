#!/usr/bin/env python3
"""
Tests for listing filesystem directories and archive directories.
"""

import os
import sys
import tarfile
import tempfile
import zipfile

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src', 'python'))

from arkfm.core.errors import (
    ArchiveUnreadable,
    EntryVanished,
    NotADirectory,
    NotFound,
    OperationNotSupported,
    PermissionDenied,
    UnsupportedArchiveFormat,
)
from arkfm.core.manifest_cache import ManifestCache
from arkfm.core.models import ArchiveAddress, EntryKind, FileSystemAddress
from arkfm.services.archive_tool import ArchiveTool
from arkfm.services.entry_lister import EntryLister


def by_name(entries):
    return {entry.name: entry for entry in entries}


def test_list_filesystem_directory():
    with tempfile.TemporaryDirectory() as temp_dir:
        os.mkdir(os.path.join(temp_dir, "sub"))
        with open(os.path.join(temp_dir, "file.txt"), "w") as f:
            f.write("12345")

        entries = by_name(EntryLister().list(FileSystemAddress(temp_dir)))
        assert set(entries) == {"sub", "file.txt"}
        assert entries["sub"].kind is EntryKind.DIRECTORY
        assert entries["file.txt"].kind is EntryKind.FILE
        assert entries["file.txt"].size == 5
        assert entries["file.txt"].address == FileSystemAddress(os.path.join(temp_dir, "file.txt"))
        assert entries["file.txt"].mode is not None


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlink_is_reported_as_symlink():
    with tempfile.TemporaryDirectory() as temp_dir:
        target = os.path.join(temp_dir, "real")
        os.mkdir(target)
        os.symlink(target, os.path.join(temp_dir, "link"))
        entries = by_name(EntryLister().list(FileSystemAddress(temp_dir)))
        assert entries["link"].kind is EntryKind.SYMLINK
        assert entries["real"].kind is EntryKind.DIRECTORY


def test_missing_and_non_directory_paths():
    with tempfile.TemporaryDirectory() as temp_dir:
        lister = EntryLister()
        with pytest.raises(NotFound):
            lister.list(FileSystemAddress(os.path.join(temp_dir, "missing")))

        path = os.path.join(temp_dir, "plain.txt")
        open(path, "w").close()
        with pytest.raises(NotADirectory):
            lister.list(FileSystemAddress(path))


def test_list_zip_levels_with_injected_clock():
    with tempfile.TemporaryDirectory() as temp_dir:
        archive = os.path.join(temp_dir, "sample.zip")
        with zipfile.ZipFile(archive, 'w') as zipf:
            for name in ("a/b/c.txt", "a/d.txt", "e.txt"):
                zipf.writestr(name, name)

        lister = EntryLister(clock=lambda: 1234.0)
        root = by_name(lister.list(ArchiveAddress(archive)))
        assert set(root) == {"a", "e.txt"}
        assert root["a"].kind is EntryKind.DIRECTORY
        assert root["e.txt"].modified_at == 1234.0

        inner = by_name(lister.list(ArchiveAddress(archive, "a")))
        assert set(inner) == {"b", "d.txt"}
        assert inner["b"].address == ArchiveAddress(archive, "a/b")

        with pytest.raises(NotFound):
            lister.list(ArchiveAddress(archive, "zzz"))
        with pytest.raises(NotADirectory):
            lister.list(ArchiveAddress(archive, "e.txt"))


def test_tar_listing_uses_manifest_cache():
    with tempfile.TemporaryDirectory() as temp_dir:
        payload = os.path.join(temp_dir, "payload.txt")
        with open(payload, "w") as f:
            f.write("x")
        archive = os.path.join(temp_dir, "sample.tgz")
        with tarfile.open(archive, "w:gz") as tar:
            tar.add(payload, arcname="dir/payload.txt")

        cache = ManifestCache()
        lister = EntryLister()
        root = lister.list(ArchiveAddress(archive), cache)
        assert [entry.name for entry in root] == ["dir"]
        assert archive in cache

        # the cached manifest still serves after the file is gone
        os.unlink(archive)
        inner = lister.list(ArchiveAddress(archive, "dir"), cache)
        assert [entry.name for entry in inner] == ["payload.txt"]


class UnrarListing:
    """Answers ``unrar lb`` the way the real binary does: no slash on folders."""

    def __init__(self, output):
        self.output = output

    def run(self, args, timeout=None, cwd=None):
        return self.output


def test_rar_listing_has_unique_names():
    lister = EntryLister(ArchiveTool(UnrarListing("docs\ndocs/a.txt\nreadme.txt\n")))
    entries = lister.list(ArchiveAddress("/tmp/set.rar"))
    assert [(entry.name, entry.kind) for entry in entries] == [
        ("docs", EntryKind.DIRECTORY),
        ("readme.txt", EntryKind.FILE),
    ]
    assert len({entry.name for entry in entries}) == len(entries)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_dangling_symlink_is_not_found():
    with tempfile.TemporaryDirectory() as temp_dir:
        link = os.path.join(temp_dir, "broken")
        os.symlink(os.path.join(temp_dir, "gone"), link)
        with pytest.raises(NotFound):
            EntryLister().list(FileSystemAddress(link))


def test_unreadable_directory_is_permission_denied(monkeypatch):
    def refuse(path):
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr("arkfm.services.entry_lister.os.listdir", refuse)
    with pytest.raises(PermissionDenied):
        EntryLister().list(FileSystemAddress("/srv/locked/inner"))


def test_archive_errors():
    with tempfile.TemporaryDirectory() as temp_dir:
        lister = EntryLister()
        with pytest.raises(UnsupportedArchiveFormat):
            lister.list(ArchiveAddress(os.path.join(temp_dir, "file.7z")))

        broken = os.path.join(temp_dir, "broken.zip")
        with open(broken, "wb") as f:
            f.write(b"garbage")
        with pytest.raises(ArchiveUnreadable):
            lister.list(ArchiveAddress(broken))


def test_stat_entry():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "note.txt")
        with open(path, "w") as f:
            f.write("abc")
        lister = EntryLister()

        entry = lister.stat_entry(FileSystemAddress(path))
        assert entry.name == "note.txt"
        assert entry.size == 3

        os.unlink(path)
        with pytest.raises(EntryVanished):
            lister.stat_entry(FileSystemAddress(path))

        with pytest.raises(OperationNotSupported):
            lister.stat_entry(ArchiveAddress(os.path.join(temp_dir, "a.zip"), "x"))


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
