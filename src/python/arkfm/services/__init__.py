"""
Service layer package for arkfm.
This package contains the coordinators between the UI layer and the core
browsing model, plus the collaborators that touch the OS.
"""

from .shell_runner import ShellRunner
from .archive_tool import ArchiveFormat, ArchiveTool, detect_archive_format, is_archive
from .config_service import ConfigService
from .entry_lister import EntryLister
from .places import Place, PlaceRegistry
from .tag_service import TagService
from .file_operations import ClipboardAction, FileOperationsService, OperationResult
from .search_service import SearchService
from .navigation_service import NavigationService, OpenAction
from .application import ApplicationService, SelectModifier

__all__ = [
    'ShellRunner',
    'ArchiveFormat',
    'ArchiveTool',
    'detect_archive_format',
    'is_archive',
    'ConfigService',
    'EntryLister',
    'Place',
    'PlaceRegistry',
    'TagService',
    'ClipboardAction',
    'FileOperationsService',
    'OperationResult',
    'SearchService',
    'NavigationService',
    'OpenAction',
    'ApplicationService',
    'SelectModifier',
]
