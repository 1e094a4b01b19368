"""
File operations on the real filesystem: copy, move, delete, rename, create.
Archive contents are read-only and rejected up front.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from ..core.errors import OperationNotSupported
from ..core.models import ArchiveAddress, FileSystemAddress, PathAddress

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Outcome for one item of a batch operation."""
    source: str
    success: bool
    destination: Optional[str] = None
    error_message: str = ""


class ClipboardAction(Enum):
    COPY = "copy"
    CUT = "cut"


def _filesystem_path(address: PathAddress) -> str:
    if isinstance(address, ArchiveAddress):
        raise OperationNotSupported("Archive contents are read-only", address)
    return address.path


class FileOperationsService:
    """Batch file operations; a failing item never stops the batch."""

    def __init__(self):
        self.clipboard: List[PathAddress] = []
        self.clipboard_action: Optional[ClipboardAction] = None

    def copy_entries(self, sources: Iterable[PathAddress], target_dir: PathAddress) -> List[OperationResult]:
        """Copy each source into ``target_dir`` keeping its basename."""
        return self._transfer(sources, target_dir, self._copy_one)

    def move_entries(self, sources: Iterable[PathAddress], target_dir: PathAddress) -> List[OperationResult]:
        return self._transfer(sources, target_dir, shutil.move)

    def _transfer(self, sources, target_dir, operation) -> List[OperationResult]:
        target = _filesystem_path(target_dir)
        results = []
        for source in sources:
            try:
                src = _filesystem_path(source)
                dest = os.path.join(target, os.path.basename(src))
                if os.path.lexists(dest):
                    raise FileExistsError(f"{dest} already exists")
                operation(src, dest)
                results.append(OperationResult(src, True, dest))
            except (OSError, shutil.Error, OperationNotSupported) as e:
                logger.warning("Transfer of %s failed: %s", source, e)
                results.append(OperationResult(str(source), False, error_message=str(e)))
        return results

    @staticmethod
    def _copy_one(src: str, dest: str):
        if os.path.isdir(src) and not os.path.islink(src):
            shutil.copytree(src, dest, symlinks=True)
        else:
            shutil.copy2(src, dest, follow_symlinks=False)

    def delete_entries(self, targets: Iterable[PathAddress]) -> List[OperationResult]:
        """Delete files, symlinks and (recursively) directories."""
        results = []
        for target in targets:
            try:
                path = _filesystem_path(target)
                if os.path.isdir(path) and not os.path.islink(path):
                    shutil.rmtree(path)
                else:
                    os.unlink(path)
                results.append(OperationResult(path, True))
            except (OSError, OperationNotSupported) as e:
                logger.warning("Delete of %s failed: %s", target, e)
                results.append(OperationResult(str(target), False, error_message=str(e)))
        return results

    def rename(self, address: PathAddress, new_name: str) -> FileSystemAddress:
        """Rename within the same directory. Returns the new address."""
        path = _filesystem_path(address)
        new_name = new_name.strip()
        if not new_name or os.sep in new_name or new_name in (".", ".."):
            raise ValueError(f"Invalid name: {new_name!r}")
        dest = os.path.join(os.path.dirname(path), new_name)
        if dest == path:
            return FileSystemAddress(path)
        if os.path.lexists(dest):
            raise FileExistsError(f"{dest} already exists")
        os.rename(path, dest)
        logger.info("Renamed %s to %s", path, dest)
        return FileSystemAddress(dest)

    def create_folder(self, directory: PathAddress, name: str) -> FileSystemAddress:
        path = os.path.join(_filesystem_path(directory), name)
        os.mkdir(path)
        return FileSystemAddress(path)

    def create_file(self, directory: PathAddress, name: str) -> FileSystemAddress:
        path = os.path.join(_filesystem_path(directory), name)
        with open(path, "x", encoding="utf-8"):
            pass
        return FileSystemAddress(path)

    def create_links(self, sources: Iterable[PathAddress], target_dir: PathAddress) -> List[OperationResult]:
        """Create a symlink in ``target_dir`` for each source."""
        return self._transfer(sources, target_dir, os.symlink)

    # Clipboard

    def copy_to_clipboard(self, addresses: Iterable[PathAddress]):
        self._set_clipboard(addresses, ClipboardAction.COPY)

    def cut_to_clipboard(self, addresses: Iterable[PathAddress]):
        self._set_clipboard(addresses, ClipboardAction.CUT)

    def _set_clipboard(self, addresses, action: ClipboardAction):
        items = list(addresses)
        if not items:
            return
        self.clipboard = items
        self.clipboard_action = action

    def paste(self, target_dir: PathAddress) -> List[OperationResult]:
        """Paste the clipboard into ``target_dir``; a cut is consumed."""
        if not self.clipboard:
            return []
        if self.clipboard_action is ClipboardAction.CUT:
            results = self.move_entries(self.clipboard, target_dir)
            self.clipboard = []
            self.clipboard_action = None
        else:
            results = self.copy_entries(self.clipboard, target_dir)
        return results
