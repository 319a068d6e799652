# tab_easymotion/core/protocols.py
"""
Protocol interfaces for the collaborators the hint engine talks to.

The host application (tab groups, activation, message boxes) and durable storage
live outside the core. Depending on these small Protocols keeps the tracker and
controller testable with in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable
from typing_extensions import TypedDict


# Typed structures used across components ------------------------------------

class StoredUsage(TypedDict):
    """
    One persisted usage record.

    Example:
      {"count": 7, "lastActivatedAt": 1767225600000}
    """
    count: int
    lastActivatedAt: int


class UsageSnapshotEntry(TypedDict):
    """Usage of one tab for the current session, heat in [0, 1]."""
    count: int
    lastActivatedAt: int
    heat: float


UsageMapping = Dict[str, StoredUsage]          # usage key -> record
UsageSnapshot = Dict[str, UsageSnapshotEntry]  # descriptor id -> snapshot entry


# Protocols ------------------------------------------------------------------

@runtime_checkable
class KeyValueStore(Protocol):
    """Durable key-value storage (workspace state)."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


@runtime_checkable
class TabSource(Protocol):
    """Host view of open tabs. active_group is a TabGroup or None."""

    @property
    def active_group(self) -> Any:
        ...


@runtime_checkable
class TabActivator(Protocol):
    """Performs the actual focus switch. Raises UnsupportedItemKind when it cannot."""

    def reveal(self, descriptor: Any) -> None:
        ...


@runtime_checkable
class ActivationEvents(Protocol):
    """
    Host notifications the usage tracker listens to.
    Each on_* registers a callback and returns an unsubscribe callable.
    """

    @property
    def groups(self) -> List[Any]:
        """Every tab group, in view-column order."""
        ...

    def on_tab_activated(self, listener: Callable[[Any, bool], None]) -> Callable[[], None]:
        """listener(tab, opened) when a tab becomes active or is opened active."""
        ...

    def on_group_changed(self, listener: Callable[[Any], None]) -> Callable[[], None]:
        """listener(group) when a group's state changes."""
        ...

    def on_editor_changed(self, listener: Callable[[Optional[str]], None]) -> Callable[[], None]:
        """listener(uri) when the active text editor changes."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """User-visible, non-blocking messages."""

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...
