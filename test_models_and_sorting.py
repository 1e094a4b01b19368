#!/usr/bin/env python3
"""
Tests for addresses, entries, sorting and the manifest cache.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src', 'python'))

from arkfm.config import parse_human_size
from arkfm.core.manifest_cache import ManifestCache
from arkfm.core.models import (
    ArchiveAddress,
    Entry,
    EntryKind,
    FileSystemAddress,
    archive_suffix,
    parse_address,
)
from arkfm.core.sorting import SortDirection, SortKey, SortPolicy, sort_entries


def test_parse_address():
    assert parse_address("/data/dir") == FileSystemAddress("/data/dir")
    assert parse_address("/data/backup.zip") == FileSystemAddress("/data/backup.zip")
    assert parse_address("/data/backup.zip:/a/b") == ArchiveAddress("/data/backup.zip", "a/b")
    assert parse_address("/data/x.TAR.GZ:/") == ArchiveAddress("/data/x.TAR.GZ", "")


def test_internal_path_is_normalised():
    address = ArchiveAddress("/data/f.zip", "/a//b/")
    assert address.internal_path == "a/b"
    assert address == ArchiveAddress("/data/f.zip", "a/b")
    assert str(address) == "/data/f.zip:/a/b"
    assert ArchiveAddress("/data/f.zip").is_root


def test_archive_parent_leaves_archive_at_root():
    inner = ArchiveAddress("/data/f.zip", "a/b")
    assert inner.parent() == ArchiveAddress("/data/f.zip", "a")
    assert inner.parent().parent() == ArchiveAddress("/data/f.zip", "")
    assert ArchiveAddress("/data/f.zip").parent() == FileSystemAddress("/data")
    assert FileSystemAddress("/").parent() is None


def test_breadcrumbs():
    crumbs = ArchiveAddress("/data/f.zip", "a/b").breadcrumbs()
    assert [label for label, _ in crumbs] == ["f.zip", "a", "b"]
    assert crumbs[-1][1] == ArchiveAddress("/data/f.zip", "a/b")
    assert crumbs[0][1].is_root


def test_entry_properties():
    entry = Entry("Backup.TGZ", FileSystemAddress("/d/Backup.TGZ"), EntryKind.FILE, mode=0o100644)
    assert entry.is_archive
    assert entry.permissions == "644"
    assert not entry.is_text

    notes = Entry("notes.md", FileSystemAddress("/d/notes.md"), EntryKind.FILE)
    assert notes.is_text
    assert notes.permissions is None

    assert archive_suffix("a.tar.gz") == ".tar.gz"
    assert archive_suffix("a.gz") is None


def test_human_size():
    assert parse_human_size(1023) == "1023 B"
    assert parse_human_size(1024) == "1.0 KB"
    assert parse_human_size(1024 * 1024) == "1.0 MB"


def make(name, kind=EntryKind.FILE, size=0, modified=0.0):
    return Entry(name, FileSystemAddress(f"/s/{name}"), kind, size=size, modified_at=modified)


def test_directories_come_first_in_both_directions():
    entries = [make("b.txt"), make("zdir", EntryKind.DIRECTORY), make("A.txt"),
               make("adir", EntryKind.DIRECTORY)]

    ascending = [e.name for e in sort_entries(entries, SortKey.NAME, SortDirection.ASCENDING)]
    assert ascending == ["adir", "zdir", "A.txt", "b.txt"]

    descending = [e.name for e in sort_entries(entries, SortKey.NAME, SortDirection.DESCENDING)]
    assert descending == ["zdir", "adir", "b.txt", "A.txt"]


def test_sort_is_stable_for_equal_keys():
    entries = [make("first", size=10), make("second", size=10), make("small", size=1)]
    ordered = [e.name for e in sort_entries(entries, SortKey.SIZE)]
    assert ordered == ["small", "first", "second"]

    reversed_order = [e.name for e in sort_entries(entries, SortKey.SIZE, SortDirection.DESCENDING)]
    assert reversed_order == ["first", "second", "small"]


def test_sort_by_type_and_modified():
    entries = [make("c.zip", modified=3), make("a.txt", modified=1), make("b.md", modified=2)]
    assert [e.name for e in sort_entries(entries, SortKey.TYPE)] == ["b.md", "a.txt", "c.zip"]
    assert [e.name for e in sort_entries(entries, SortKey.MODIFIED)] == ["a.txt", "b.md", "c.zip"]


def test_sort_policy_round_trips_through_settings():
    policy = SortPolicy(SortKey.CREATED, SortDirection.DESCENDING)
    assert policy.to_dict() == {"sort_key": "created", "sort_order": "desc"}
    assert SortPolicy.from_dict(policy.to_dict()) == policy
    assert SortPolicy.from_dict({}) == SortPolicy()


def test_manifest_cache_lru_and_release():
    cache = ManifestCache(max_archives=2)
    cache.put("/a.zip", ["x"])
    cache.put("/b.zip", ["y"])
    assert cache.get("/a.zip") == ["x"]
    cache.put("/c.zip", ["z"])

    assert "/b.zip" not in cache
    assert "/a.zip" in cache
    assert len(cache) == 2

    cache.release("/a.zip")
    assert cache.get("/a.zip") is None


def test_manifest_cache_fetches_once():
    calls = []

    def fetch(path):
        calls.append(path)
        return ["member"]

    cache = ManifestCache()
    assert cache.get_or_fetch("/a.zip", fetch) == ["member"]
    assert cache.get_or_fetch("/a.zip", fetch) == ["member"]
    assert calls == ["/a.zip"]


def test_manifest_cache_failed_fetch_stores_nothing():
    def fetch(path):
        raise RuntimeError("boom")

    cache = ManifestCache()
    with pytest.raises(RuntimeError):
        cache.get_or_fetch("/a.zip", fetch)
    assert "/a.zip" not in cache


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
