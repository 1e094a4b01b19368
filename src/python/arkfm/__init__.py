"""
arkfm package initialization.
"""

# Import core components
from .core import (
    ArchiveAddress,
    Entry,
    EntryKind,
    FileSystemAddress,
    NavigationHistory,
    Pane,
    SelectionModel,
    SortPolicy,
    Tab,
    parse_address,
)

# Import services
from .services import (
    ApplicationService,
    ArchiveTool,
    ConfigService,
    EntryLister,
    NavigationService,
)

# Import configuration
from .config import CONFIG

__version__ = CONFIG["APP_VERSION"]

__all__ = [
    # Core components
    "ArchiveAddress",
    "Entry",
    "EntryKind",
    "FileSystemAddress",
    "NavigationHistory",
    "Pane",
    "SelectionModel",
    "SortPolicy",
    "Tab",
    "parse_address",

    # Services
    "ApplicationService",
    "ArchiveTool",
    "ConfigService",
    "EntryLister",
    "NavigationService",

    # Configuration
    "CONFIG",
]
