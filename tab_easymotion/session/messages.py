"""
messages.py
Message vocabulary between the core (session owner) and the presentation side.

Every message is a plain dict with a "type" tag once it is on the channel:
  presentation -> core: ready, requestUpdate, select {hint}, cancel
  core -> presentation: updateEntries {payload: {entries, alphabet, themeKind}}
Payloads are copied on encode so neither side can see the other's objects.
"""

from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from tab_easymotion.core.hint_registry import HintEntry

READY = "ready"
REQUEST_UPDATE = "requestUpdate"
SELECT = "select"
CANCEL = "cancel"
UPDATE_ENTRIES = "updateEntries"


@dataclass(frozen=True)
class Ready:
    type: str = field(default=READY, init=False)


@dataclass(frozen=True)
class RequestUpdate:
    type: str = field(default=REQUEST_UPDATE, init=False)


@dataclass(frozen=True)
class Select:
    hint: str
    type: str = field(default=SELECT, init=False)


@dataclass(frozen=True)
class Cancel:
    type: str = field(default=CANCEL, init=False)


@dataclass(frozen=True)
class UpdatePayload:
    entries: List[HintEntry]
    alphabet: str
    theme_kind: str = "dark"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entries": [e.to_dict() for e in self.entries],
            "alphabet": self.alphabet,
            "themeKind": self.theme_kind,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "UpdatePayload":
        return cls(
            entries=[HintEntry.from_dict(e) for e in d.get("entries") or []],
            alphabet=str(d.get("alphabet") or ""),
            theme_kind=str(d.get("themeKind") or ""),
        )


@dataclass(frozen=True)
class UpdateEntries:
    payload: UpdatePayload
    type: str = field(default=UPDATE_ENTRIES, init=False)


PanelMessage = Union[Ready, RequestUpdate, Select, Cancel]
ViewMessage = UpdateEntries
Message = Union[Ready, RequestUpdate, Select, Cancel, UpdateEntries]


class UnknownMessage(ValueError):
    """A dict on the channel without a known type tag."""


def encode(message: Message) -> Dict[str, Any]:
    if isinstance(message, UpdateEntries):
        return {"type": UPDATE_ENTRIES, "payload": message.payload.to_dict()}
    if isinstance(message, Select):
        return {"type": SELECT, "hint": message.hint}
    return {"type": message.type}


def decode(raw: Dict[str, Any]) -> Message:
    if not isinstance(raw, dict):
        raise UnknownMessage(f"not a message: {raw!r}")
    kind = raw.get("type")
    if kind == READY:
        return Ready()
    if kind == REQUEST_UPDATE:
        return RequestUpdate()
    if kind == CANCEL:
        return Cancel()
    if kind == SELECT:
        return Select(hint=str(raw.get("hint", "")))
    if kind == UPDATE_ENTRIES:
        return UpdateEntries(UpdatePayload.from_dict(raw.get("payload") or {}))
    raise UnknownMessage(f"unknown message type: {kind!r}")


def copy_wire(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy used at the channel boundary."""
    return copy.deepcopy(raw)
