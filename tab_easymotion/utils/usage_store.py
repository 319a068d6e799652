# usage_store.py - durable key-value stores for workspace state

# - JsonFileStore: one JSON document on disk, keys -> JSON values, rewritten whole on set()
# - MemoryStore: same interface, nothing touches the disk (tests, throwaway sessions)
# Both satisfy core.protocols.KeyValueStore.

import copy
import json
import os
from typing import Any, Dict, Optional

from tab_easymotion.utils.logger_utils import Log

# Default location of the workspace state file
DATA_DIRECTORY = "data"
STATE_PATH = os.path.join(DATA_DIRECTORY, "workspace_state.json")


class MemoryStore:
    """In-memory store. Values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStore:
    """
    Workspace state kept as a single JSON document.
    Read once on construction; every set() rewrites the file.
    Args:
        path (str): JSON file location (parent folders are created on write)
    """

    def __init__(self, path: str = STATE_PATH):
        self.path = path
        self._data: Dict[str, Any] = self._load()

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self._save()

    # Persistence ------------------------------------------------------------
    def _load(self) -> Dict[str, Any]:
        """
        Load the document from disk.
        Returns:
            dict: stored keys, or an empty dict if missing/unreadable.
        """
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            Log.error(f"[Store] load failed ({self.path}): {e}")
            return {}
        if not isinstance(data, dict):
            Log.warning(f"[Store] ignoring non-object state in {self.path}")
            return {}
        return data

    def _save(self) -> None:
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
        os.replace(tmp, self.path)
