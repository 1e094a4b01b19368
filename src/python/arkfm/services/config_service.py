"""
Settings store for arkfm.
Persists tags, custom places, default applications and view preferences as
one JSON object.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def default_settings_path() -> str:
    """``$XDG_CONFIG_HOME/arkfm/settings.json``, falling back to ``~/.config``."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return os.path.join(base, "arkfm", "settings.json")


class ConfigService:
    """JSON-file backed key-value store.

    A missing or unreadable file yields empty settings; write failures are
    logged and reported through the return value of ``save_settings``.
    """

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or default_settings_path()
        self.settings: Dict[str, Any] = {}
        self.reload()

    def reload(self):
        """Re-read the file, discarding unsaved changes."""
        self.settings = {}
        if not os.path.exists(self.config_file):
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not load settings from %s: %s", self.config_file, e)
            return
        if isinstance(loaded, dict):
            self.settings = loaded
        else:
            logger.warning("Ignoring settings in %s: top level is not an object", self.config_file)

    def save_settings(self) -> bool:
        """Write all settings; the old file is replaced only once the new one is complete."""
        directory = os.path.dirname(os.path.abspath(self.config_file))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".settings-", suffix=".json", dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.config_file)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save settings to %s: %s", self.config_file, e)
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            return False

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def set_setting(self, key: str, value: Any):
        self.settings[key] = value

    def remove_setting(self, key: str):
        self.settings.pop(key, None)

    def get_all_settings(self) -> Dict[str, Any]:
        return self.settings.copy()

    def update_settings(self, settings: Dict[str, Any]):
        self.settings.update(settings)
