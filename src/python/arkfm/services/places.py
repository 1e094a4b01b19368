"""
Place registry: named shortcut locations plus user-defined custom places.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import CONFIG
from ..core.errors import NotFound
from ..core.models import FileSystemAddress
from .config_service import ConfigService

logger = logging.getLogger(__name__)

CUSTOM_PLACES_KEY = "custom_places"


@dataclass
class Place:
    name: str
    path: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "path": self.path}


def builtin_places(home: Optional[str] = None) -> Dict[str, str]:
    """Map of built-in place names to paths below the home directory."""
    home = home or os.path.expanduser("~")
    places = {"home": home}
    for name in CONFIG["PLACE_NAMES"]:
        if name != "home":
            places[name] = os.path.join(home, name.capitalize())
    return places


class PlaceRegistry:
    """Resolves place names; custom places are persisted via ConfigService."""

    def __init__(self, config_service: Optional[ConfigService] = None, home: Optional[str] = None):
        self.config_service = config_service
        self.places = builtin_places(home)

    def resolve(self, name: str) -> FileSystemAddress:
        """Address for a built-in place name or a custom place name."""
        if name in self.places:
            return FileSystemAddress(self.places[name])
        for place in self.custom_places():
            if place.name == name:
                return FileSystemAddress(place.path)
        raise NotFound(f"Unknown place: {name}")

    @property
    def home(self) -> FileSystemAddress:
        return FileSystemAddress(self.places["home"])

    def custom_places(self) -> List[Place]:
        if self.config_service is None:
            return []
        raw = self.config_service.get_setting(CUSTOM_PLACES_KEY, []) or []
        places = []
        for item in raw:
            if isinstance(item, dict) and "path" in item:
                places.append(Place(item.get("name") or os.path.basename(item["path"]), item["path"]))
        return places

    def add_custom_place(self, path: str, name: Optional[str] = None) -> bool:
        """Add ``path`` unless it is already a custom place."""
        path = os.path.abspath(path)
        places = self.custom_places()
        if any(place.path == path for place in places):
            return False
        places.append(Place(name or os.path.basename(path) or path, path))
        self._store(places)
        logger.info("Added custom place %s", path)
        return True

    def remove_custom_place(self, path: str) -> bool:
        path = os.path.abspath(path)
        places = self.custom_places()
        remaining = [place for place in places if place.path != path]
        if len(remaining) == len(places):
            return False
        self._store(remaining)
        return True

    def _store(self, places: List[Place]):
        if self.config_service is None:
            return
        self.config_service.set_setting(CUSTOM_PLACES_KEY, [place.to_dict() for place in places])
        self.config_service.save_settings()
