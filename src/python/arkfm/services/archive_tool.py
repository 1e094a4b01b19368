"""
Archive tool for arkfm.
Reads archive manifests and performs extraction and creation.
"""

import logging
import os
import tarfile
import zipfile
from enum import Enum
from typing import Iterable, List, Optional

from ..core.errors import (
    ArchiveUnreadable,
    FileManagerError,
    OperationNotSupported,
    ShellCommandError,
    UnsupportedArchiveFormat,
)
from ..core.models import archive_suffix
from .shell_runner import ShellRunner

logger = logging.getLogger(__name__)


class ArchiveFormat(str, Enum):
    ZIP = "zip"
    TAR = "tar"
    TAR_GZ = "tar.gz"
    RAR = "rar"


_SUFFIX_FORMATS = {
    ".zip": ArchiveFormat.ZIP,
    ".tar": ArchiveFormat.TAR,
    ".tar.gz": ArchiveFormat.TAR_GZ,
    ".tgz": ArchiveFormat.TAR_GZ,
    ".rar": ArchiveFormat.RAR,
}


def detect_archive_format(path: str) -> Optional[ArchiveFormat]:
    """Archive format implied by the file name, or None."""
    suffix = archive_suffix(os.path.basename(path))
    return _SUFFIX_FORMATS.get(suffix) if suffix else None


def is_archive(path: str) -> bool:
    return detect_archive_format(path) is not None


def _clean_member(name: str) -> str:
    while name.startswith("./"):
        name = name[2:]
    return name.lstrip("/")


class ArchiveTool:
    """Lists, extracts and creates archives.

    zip and tar variants are handled in-process; rar goes through ``unrar``.
    """

    def __init__(self, runner: Optional[ShellRunner] = None):
        self.runner = runner or ShellRunner()

    def _require_format(self, archive_file: str) -> ArchiveFormat:
        fmt = detect_archive_format(archive_file)
        if fmt is None:
            raise UnsupportedArchiveFormat(f"Not a supported archive: {archive_file}", archive_file)
        return fmt

    def list_members(self, archive_file: str) -> List[str]:
        """Return every member path of ``archive_file`` in archive order.

        Directory members end with ``/``.

        Raises:
            UnsupportedArchiveFormat: the extension is not recognised.
            ArchiveUnreadable: the archive is missing, corrupt or the tool failed.
        """
        fmt = self._require_format(archive_file)
        try:
            if fmt is ArchiveFormat.ZIP:
                with zipfile.ZipFile(archive_file, "r") as zip_ref:
                    names = zip_ref.namelist()
            elif fmt is ArchiveFormat.RAR:
                output = self.runner.run(["unrar", "lb", archive_file])
                names = [line for line in output.splitlines() if line.strip()]
            else:
                mode = "r:gz" if fmt is ArchiveFormat.TAR_GZ else "r:"
                with tarfile.open(archive_file, mode) as tar_ref:
                    names = [member.name + "/" if member.isdir() else member.name
                             for member in tar_ref.getmembers()]
        except zipfile.BadZipFile as e:
            raise ArchiveUnreadable(f"Bad ZIP file: {archive_file}", archive_file) from e
        except tarfile.TarError as e:
            raise ArchiveUnreadable(f"Bad TAR file: {archive_file}: {e}", archive_file) from e
        except ShellCommandError as e:
            raise ArchiveUnreadable(f"Failed to read archive: {e.message}", archive_file) from e
        except OSError as e:
            raise ArchiveUnreadable(f"Failed to read archive {archive_file}: {e}", archive_file) from e

        members = [_clean_member(name) for name in names]
        members = [name for name in members if name and name != "."]
        logger.debug("Archive %s lists %d members", archive_file, len(members))
        return members

    def extract(self, archive_file: str, target_dir: str) -> str:
        """Extract everything into ``target_dir`` (created if missing)."""
        fmt = self._require_format(archive_file)
        os.makedirs(target_dir, exist_ok=True)
        try:
            if fmt is ArchiveFormat.ZIP:
                with zipfile.ZipFile(archive_file, "r") as zip_ref:
                    zip_ref.extractall(target_dir)
            elif fmt is ArchiveFormat.RAR:
                self.runner.run(["unrar", "x", "-o+", archive_file, target_dir + os.sep], timeout=None)
            else:
                mode = "r:gz" if fmt is ArchiveFormat.TAR_GZ else "r:"
                with tarfile.open(archive_file, mode) as tar_ref:
                    if hasattr(tarfile, "data_filter"):
                        tar_ref.extractall(target_dir, filter="data")
                    else:
                        tar_ref.extractall(target_dir)
        except (zipfile.BadZipFile, tarfile.TarError) as e:
            raise ArchiveUnreadable(f"Failed to extract {archive_file}: {e}", archive_file) from e
        except ShellCommandError as e:
            raise ArchiveUnreadable(f"Failed to extract {archive_file}: {e.message}", archive_file) from e
        except OSError as e:
            raise ArchiveUnreadable(f"Failed to extract {archive_file}: {e}", archive_file) from e
        logger.info("Extracted %s into %s", archive_file, target_dir)
        return target_dir

    def extract_here(self, archive_file: str) -> str:
        """Extract into a sibling folder named after the archive."""
        self._require_format(archive_file)
        name = os.path.basename(archive_file)
        stem = name[:len(name) - len(archive_suffix(name))] or name
        target = os.path.join(os.path.dirname(os.path.abspath(archive_file)), stem)
        return self.extract(archive_file, target)

    def create(self, archive_path: str, sources: Iterable[str],
               fmt: Optional[ArchiveFormat] = None) -> str:
        """Create ``archive_path`` from files and folders in ``sources``.

        Members are stored relative to each source's parent directory.
        """
        fmt = ArchiveFormat(fmt) if fmt is not None else self._require_format(archive_path)
        if fmt is ArchiveFormat.RAR:
            raise OperationNotSupported("Creating rar archives is not supported", archive_path)

        paths = [os.path.abspath(source) for source in sources]
        try:
            if fmt is ArchiveFormat.ZIP:
                with zipfile.ZipFile(archive_path, "w", zipfile.ZIP_DEFLATED) as zip_ref:
                    for source in paths:
                        base = os.path.dirname(source)
                        if os.path.isdir(source):
                            for root, dirs, files in os.walk(source):
                                dirs.sort()
                                zip_ref.write(root, os.path.relpath(root, base))
                                for name in sorted(files):
                                    full = os.path.join(root, name)
                                    zip_ref.write(full, os.path.relpath(full, base))
                        else:
                            zip_ref.write(source, os.path.basename(source))
            else:
                mode = "w:gz" if fmt is ArchiveFormat.TAR_GZ else "w"
                with tarfile.open(archive_path, mode) as tar_ref:
                    for source in paths:
                        tar_ref.add(source, arcname=os.path.basename(source))
        except OSError as e:
            raise FileManagerError(f"Failed to create {archive_path}: {e}", archive_path) from e
        logger.info("Created %s archive %s from %d item(s)", fmt.value, archive_path, len(paths))
        return archive_path
