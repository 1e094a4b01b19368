"""
Colour tags attached to file paths.
"""

import logging
import os
from typing import Dict, Optional

from .config_service import ConfigService

logger = logging.getLogger(__name__)

TAGS_KEY = "tags"


class TagService:
    """Keeps a path -> colour mapping in the settings store."""

    def __init__(self, config_service: ConfigService):
        self.config_service = config_service

    def _tags(self) -> Dict[str, str]:
        tags = self.config_service.get_setting(TAGS_KEY, {})
        return dict(tags) if isinstance(tags, dict) else {}

    def tag_for(self, path: str) -> Optional[str]:
        return self._tags().get(os.path.abspath(path))

    def set_tag(self, path: str, color: Optional[str]):
        """Tag ``path`` with ``color``; a falsy colour removes the tag."""
        tags = self._tags()
        key = os.path.abspath(path)
        if color:
            tags[key] = color
        else:
            tags.pop(key, None)
        self.config_service.set_setting(TAGS_KEY, tags)
        self.config_service.save_settings()
        logger.debug("Tag for %s set to %s", key, color)

    def clear_tag(self, path: str):
        self.set_tag(path, None)

    def all_tags(self) -> Dict[str, str]:
        return self._tags()
