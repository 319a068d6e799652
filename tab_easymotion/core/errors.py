# errors.py
# Failure taxonomy for hint sessions.
# Every error here is contained at the session boundary: the controller turns
# them into user-visible messages and the hosting process keeps running.

from __future__ import annotations
from typing import Optional


class TabEasyMotionError(Exception):
    """Base class for all hint-session failures."""


class AlphabetExhausted(TabEasyMotionError):
    """
    The hint alphabet cannot produce the requested number of codes.
    reason is one of:
     - "empty-alphabet": nothing left after de-duplication
     - "capacity": the depth cap ran out of codes before reaching count
    """

    EMPTY = "empty-alphabet"
    CAPACITY = "capacity"

    def __init__(self, message: str, reason: str = CAPACITY):
        super().__init__(message)
        self.reason = reason


class NoMatch(TabEasyMotionError):
    """
    Transient: the typed buffer matches no hint, or the key is outside the alphabet.
    Handed to the feedback callback, never raised across the session boundary.
    """

    def __init__(self, buffer: str, char: Optional[str] = None, rejected: bool = False):
        if rejected:
            message = f"'{char}' is not a hint key"
        else:
            message = f"no hint starts with '{buffer}'"
        super().__init__(message)
        self.buffer = buffer
        self.char = char
        self.rejected = rejected


class UnresolvedSelection(TabEasyMotionError):
    """A selected code does not map to any tab in the current hint set."""

    def __init__(self, code: str):
        super().__init__(f"No tab found for hint '{code}'.")
        self.code = code


class UnsupportedItemKind(TabEasyMotionError):
    """The resolved tab cannot be activated for its kind."""

    def __init__(self, kind: str, title: str = ""):
        label = f" '{title}'" if title else ""
        super().__init__(f"Switching to {kind} tab{label} is not supported yet.")
        self.kind = kind
        self.title = title
