#!/usr/bin/env python3
"""
Tests for the application service: tabs, split view, sorting, selection
modifiers, status text, search, file operations and archive actions.
"""

import os
import shutil
import sys
import tempfile
import zipfile

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src', 'python'))

from arkfm.core.errors import OperationNotSupported
from arkfm.core.models import ArchiveAddress, FileSystemAddress
from arkfm.core.sorting import SortDirection, SortKey
from arkfm.core.tab import ViewMode
from arkfm.services.application import ApplicationService, SelectModifier
from arkfm.services.config_service import ConfigService


@pytest.fixture
def workspace():
    """root/{a.txt, b.txt, c.txt, d.txt, sub/, pack.zip} plus a settings file."""
    temp_dir = tempfile.mkdtemp()
    root = os.path.join(temp_dir, "root")
    os.makedirs(os.path.join(root, "sub"))
    for name, size in (("a.txt", 1), ("b.txt", 40), ("c.txt", 20), ("d.txt", 30)):
        with open(os.path.join(root, name), "w") as f:
            f.write("x" * size)
    with zipfile.ZipFile(os.path.join(root, "pack.zip"), 'w') as zipf:
        zipf.writestr("inner/file.txt", "f")
    yield root, os.path.join(temp_dir, "settings.json")
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def app(workspace):
    root, settings = workspace
    service = ApplicationService(ConfigService(settings))
    service.errors = []
    service.statuses = []
    service.show_error.connect(lambda title, message: service.errors.append((title, message)))
    service.update_status.connect(lambda message: service.statuses.append(message))
    yield service
    service.cleanup()


def entry_named(pane, name):
    return next(entry for entry in pane.entries if entry.name == name)


def names(entries):
    return [entry.name for entry in entries]


def test_create_and_close_tabs(workspace, app):
    root, _ = workspace
    first = app.create_tab(FileSystemAddress(root))
    second = app.create_tab(FileSystemAddress(os.path.join(root, "sub")))
    assert app.active_tab is second
    assert first.title == "root"

    assert app.close_tab(second.id) is True
    assert app.active_tab is first
    assert app.close_tab(first.id) is False
    assert app.tabs == [first]

    with pytest.raises(KeyError):
        app.get_tab(second.id)


def test_tab_on_unlistable_address_reports_error(workspace, app):
    root, _ = workspace
    tab = app.create_tab(FileSystemAddress(os.path.join(root, "missing")))
    assert tab in app.tabs
    assert app.errors and app.errors[0][0] == "Navigation Error"


def test_split_view_secondary_pane_has_no_history(workspace, app):
    root, _ = workspace
    tab = app.create_tab(FileSystemAddress(root))
    app.navigation.navigate(tab.primary_pane, ArchiveAddress(os.path.join(root, "pack.zip")))

    assert app.toggle_split(tab) is True
    secondary = tab.secondary_pane
    assert secondary.history is None
    assert secondary.address == FileSystemAddress(root)
    assert "pack.zip" in names(secondary.entries)

    tab.activate_pane(1)
    assert tab.active_pane is secondary
    app.navigation.navigate(secondary, FileSystemAddress(os.path.join(root, "sub")))
    assert app.navigation.go_back(secondary) is None

    assert app.toggle_split(tab) is False
    assert tab.active_pane is tab.primary_pane
    assert tab.visible_panes == [tab.primary_pane]


def test_sorting_is_shared_and_persisted(workspace, app):
    root, settings = workspace
    tab = app.create_tab(FileSystemAddress(root))
    pane = tab.primary_pane
    assert names(pane.entries) == ["sub", "a.txt", "b.txt", "c.txt", "d.txt", "pack.zip"]

    pane.selection.replace(entry_named(pane, "c.txt").address)
    app.set_sorting(tab, SortKey.SIZE, SortDirection.DESCENDING)
    assert names(pane.entries)[0] == "sub"
    assert names(pane.entries)[1:] == ["pack.zip", "b.txt", "d.txt", "c.txt", "a.txt"]
    assert app.sort_query(tab) == (SortKey.SIZE, SortDirection.DESCENDING)
    assert len(pane.selection) == 1

    reloaded = ConfigService(settings)
    assert reloaded.get_setting("sort_key") == "size"
    assert reloaded.get_setting("sort_order") == "desc"

    # new tabs start from the stored policy
    other = app.create_tab(FileSystemAddress(root))
    assert app.sort_query(other) == (SortKey.SIZE, SortDirection.DESCENDING)


def test_view_mode_toggle_persists(workspace, app):
    root, settings = workspace
    tab = app.create_tab(FileSystemAddress(root))
    assert tab.view_mode is ViewMode.GRID
    assert app.toggle_view_mode(tab) is ViewMode.LIST
    assert ConfigService(settings).get_setting("view_mode") == "list"
    app.set_view_mode(tab, "grid")
    assert tab.view_mode is ViewMode.GRID


def test_select_modifiers(workspace, app):
    root, _ = workspace
    pane = app.create_tab(FileSystemAddress(root)).primary_pane
    a, b, c, d = (entry_named(pane, n) for n in ("a.txt", "b.txt", "c.txt", "d.txt"))

    app.select(pane, b)
    app.select(pane, d, SelectModifier.RANGE)
    assert names(app.selection_query(pane)) == ["b.txt", "c.txt", "d.txt"]

    app.select(pane, c, SelectModifier.TOGGLE)
    assert names(app.selection_query(pane)) == ["b.txt", "d.txt"]

    app.select(pane, a)
    assert names(app.selection_query(pane)) == ["a.txt"]

    app.clear_selection(pane)
    app.select(pane, c, SelectModifier.RANGE)
    assert names(app.selection_query(pane)) == ["c.txt"]
    assert app.statuses[-1].startswith("1 item selected")


def test_status_text(workspace, app):
    root, _ = workspace
    pane = app.create_tab(FileSystemAddress(root)).primary_pane
    assert app.status_text(pane) == "No items selected"

    app.select(pane, entry_named(pane, "b.txt"))
    status = app.status_text(pane)
    assert status.startswith("1 item selected | Size: 40 B | Perms: ")
    assert "Owner: " in status
    assert "Created: " in status
    assert "Modified: " in status

    app.select(pane, entry_named(pane, "c.txt"), SelectModifier.TOGGLE)
    assert app.status_text(pane) == "2 items selected"

    app.select(pane, entry_named(pane, "a.txt"))
    os.unlink(os.path.join(root, "a.txt"))
    assert app.status_text(pane) == "1 item selected | a.txt no longer exists"


def test_status_text_inside_archive(workspace, app):
    root, _ = workspace
    tab = app.create_tab(ArchiveAddress(os.path.join(root, "pack.zip")))
    pane = tab.primary_pane
    app.select(pane, entry_named(pane, "inner"))
    assert app.status_text(pane) == "1 item selected"


def test_search(workspace, app):
    root, _ = workspace
    pane = app.create_tab(FileSystemAddress(root)).primary_pane
    assert names(app.search(pane, "B.T")) == ["b.txt"]
    assert len(app.search(pane, "  ")) == 6
    assert names(app.deep_search(pane, "inside")) == []


def test_copy_paste_and_delete(workspace, app):
    root, _ = workspace
    tab = app.create_tab(FileSystemAddress(root))
    pane = tab.primary_pane
    app.select(pane, entry_named(pane, "a.txt"))
    app.copy_selection(pane)

    app.navigation.navigate(pane, FileSystemAddress(os.path.join(root, "sub")))
    results = app.paste(pane)
    assert [r.success for r in results] == [True]
    assert names(pane.entries) == ["a.txt"]

    # pasting the same file again collides and is reported
    results = app.paste(pane)
    assert [r.success for r in results] == [False]
    assert app.errors[-1][0] == "Paste Error"

    app.select(pane, entry_named(pane, "a.txt"))
    app.delete_selection(pane)
    assert pane.entries == []
    assert os.path.exists(os.path.join(root, "a.txt"))


def test_rename_and_create_folder(workspace, app):
    root, _ = workspace
    pane = app.create_tab(FileSystemAddress(root)).primary_pane
    renamed = app.rename(pane, entry_named(pane, "a.txt"), "z.txt")
    assert renamed == FileSystemAddress(os.path.join(root, "z.txt"))
    assert "z.txt" in names(pane.entries)

    assert app.rename(pane, entry_named(pane, "b.txt"), "c.txt") is None
    assert app.errors[-1][0] == "Rename Error"

    created = app.create_folder(pane, "fresh")
    assert os.path.isdir(created.path)
    assert "fresh" in names(pane.entries)
    assert app.create_folder(pane, "fresh") is None


def test_tagging(workspace, app):
    root, _ = workspace
    pane = app.create_tab(FileSystemAddress(root)).primary_pane
    entry = entry_named(pane, "a.txt")
    app.tag_entry(entry, "red")
    assert app.tags.tag_for(entry.address.path) == "red"

    app.navigation.navigate(pane, ArchiveAddress(os.path.join(root, "pack.zip")))
    with pytest.raises(OperationNotSupported):
        app.tag_entry(entry_named(pane, "inner"), "blue")


def test_extract_and_compress(workspace, app):
    root, _ = workspace
    pane = app.create_tab(FileSystemAddress(root)).primary_pane

    app.select(pane, entry_named(pane, "pack.zip"))
    target = app.extract_archive(pane)
    assert target == os.path.join(root, "pack")
    assert os.path.isfile(os.path.join(target, "inner", "file.txt"))
    assert "pack" in names(pane.entries)

    app.select(pane, entry_named(pane, "b.txt"))
    app.select(pane, entry_named(pane, "c.txt"), SelectModifier.TOGGLE)
    archive = app.compress_selection(pane, "bundle")
    assert archive == os.path.join(root, "bundle.zip")
    with zipfile.ZipFile(archive) as zipf:
        assert sorted(zipf.namelist()) == ["b.txt", "c.txt"]
    assert "bundle.zip" in names(pane.entries)

    app.navigation.navigate(pane, ArchiveAddress(archive))
    with pytest.raises(OperationNotSupported):
        app.compress_selection(pane, "again")
    extracted = app.extract_archive(pane, os.path.join(root, "unpacked"))
    assert os.path.isfile(os.path.join(extracted, "b.txt"))


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
