"""
Error taxonomy for arkfm.

Listing failures derive from ListError so callers can surface them as one
displayable message while still matching on the concrete kind.
"""

from typing import Optional


class FileManagerError(Exception):
    """Base class for all arkfm errors."""

    def __init__(self, message: str = "", address: Optional[object] = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.address = address


class ListError(FileManagerError):
    """A location could not be listed."""


class NotFound(ListError):
    pass


class PermissionDenied(ListError):
    pass


class NotADirectory(ListError):
    pass


class UnsupportedArchiveFormat(ListError):
    pass


class ArchiveUnreadable(ListError):
    pass


class AtBoundary(FileManagerError):
    """History is already at its first or last entry."""


class EntryVanished(FileManagerError):
    """A previously listed entry no longer exists."""


class OperationNotSupported(FileManagerError):
    """The operation cannot be applied at this location (e.g. inside an archive)."""


class ShellCommandError(FileManagerError):
    """An external command failed, was missing, or timed out."""

    def __init__(self, message: str = "", command: Optional[list] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


def error_from_os(exc: OSError, address: Optional[object] = None) -> ListError:
    """Translate an OS-level error into the matching ListError."""
    text = f"{exc.strerror or exc}: {address}" if address is not None else str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFound(text, address)
    if isinstance(exc, PermissionError):
        return PermissionDenied(text, address)
    if isinstance(exc, NotADirectoryError):
        return NotADirectory(text, address)
    return ListError(text, address)
