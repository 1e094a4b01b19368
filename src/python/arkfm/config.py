"""
Configuration constants for arkfm.
"""

from typing import Any, Dict

CONFIG: Dict[str, Any] = {
    # Archive suffixes recognised for in-place browsing. Order matters for
    # suffix matching: the longest compound suffix must come first.
    "ARCHIVE_EXTENSIONS": (".tar.gz", ".tgz", ".zip", ".tar", ".rar"),
    "TEXT_EXTENSIONS": {
        ".txt", ".js", ".json", ".html", ".css", ".py", ".md", ".sh", ".xml", ".log"
    },
    "PLACE_NAMES": (
        "home", "desktop", "documents", "downloads", "pictures", "music", "videos"
    ),
    "DEEP_SEARCH_LIMIT": 200,
    "ARCHIVE_LIST_TIMEOUT": 30,
    "MANIFEST_CACHE_SIZE": 8,
    "NAVIGATION_WORKERS": 4,
    "DEFAULT_SORT_KEY": "name",
    "DEFAULT_SORT_ORDER": "asc",
    "DEFAULT_VIEW_MODE": "grid",
    "OPEN_COMMAND": "xdg-open",
    "APP_VERSION": "1.0.0",
}


def parse_human_size(size_bytes: int) -> str:
    """Format a byte count into a human-readable string."""
    KB = 1024.0
    MB = KB * 1024.0
    GB = MB * 1024.0

    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / KB:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / MB:.1f} MB"
    else:
        return f"{size_bytes / GB:.1f} GB"
