# config_manager.py - JSON config manager

import json
import os
from dataclasses import dataclass
from typing import Callable, List, Optional

from tab_easymotion.utils.logger_utils import Log

DEFAULT_ALPHABET = "asdfghjkl;wertyuiopxcvbnm"

DEFAULTS = {
    "hint_alphabet": DEFAULT_ALPHABET,
    "max_hint_length": 2,  # 0 or negative = no cap
    "theme": "dark",
}


@dataclass(frozen=True)
class ExtensionSettings:
    hint_alphabet: str
    max_hint_length: Optional[int]
    theme: str


def _max_length(raw) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int) and raw > 0:
        return raw
    return None


class Config:
    """
    Options live in a JSON file merged over DEFAULTS.
    reload() re-reads the file and calls on_change listeners if anything changed.
    """

    def __init__(self, path="config.json", create=True):
        self.path = path
        self.data = dict(DEFAULTS)
        self._listeners: List[Callable[[ExtensionSettings], None]] = []
        self._load(create)

    def _load(self, create=False):
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf8") as f:
                    stored = json.load(f)
                if isinstance(stored, dict):
                    self.data.update({k: v for k, v in stored.items() if k in DEFAULTS})
            except (OSError, ValueError) as e:
                Log.warning(f"[Config] could not read {self.path}: {e}")
        elif create:
            self.save()

    def save(self):
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def settings(self) -> ExtensionSettings:
        alphabet = self.data.get("hint_alphabet")
        return ExtensionSettings(
            hint_alphabet=alphabet if isinstance(alphabet, str) else DEFAULT_ALPHABET,
            max_hint_length=_max_length(self.data.get("max_hint_length")),
            theme=str(self.data.get("theme") or "dark"),
        )

    def show(self, out=print):
        for k, v in self.data.items():
            out(f"{k:15} = {v}")

    def set(self, key, val):
        if key not in self.data:
            raise KeyError(f"No such option: {key}")
        before = self.settings()
        self.data[key] = type(DEFAULTS[key])(val)
        self.save()
        self._notify(before)

    def reload(self):
        """Re-read the file (on a change notification)."""
        before = self.settings()
        self.data = dict(DEFAULTS)
        self._load()
        self._notify(before)

    def on_change(self, listener: Callable[[ExtensionSettings], None]) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def _notify(self, before: ExtensionSettings):
        after = self.settings()
        if after == before:
            return
        for listener in list(self._listeners):
            listener(after)
