# match_engine.py
# Incremental prefix matching of typed keys against the live hint set.
# One engine per presentation session. It owns the input buffer, derives a
# MatchState from (hints, buffer) after each change, and emits at most one
# selection before locking.

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from tab_easymotion.core.errors import NoMatch

logger = logging.getLogger(__name__)


class MatchPhase(str, Enum):
    IDLE = "idle"                      # empty buffer, every hint is a candidate
    MATCHING = "matching"              # candidates remain, none equals the buffer
    RESOLVED_EXACT = "resolved-exact"  # buffer equals a code that longer codes extend: Enter confirms
    RESOLVED_SOLE = "resolved-sole"    # buffer equals the only candidate: selects immediately
    NO_MATCH = "no-match"              # transient, nothing starts with the buffer


@dataclass(frozen=True)
class MatchState:
    """
    Derived view of the buffer against the hint set.
    exact: candidate equal to the buffer
    sole: the only candidate left (exact or not)
    next_char: the key that continues a candidate (first found, lower-case)
    """

    buffer: str
    phase: MatchPhase
    candidates: Tuple[str, ...] = ()
    exact: Optional[str] = None
    next_char: Optional[str] = None
    sole: Optional[str] = None

    @property
    def confirm_target(self) -> Optional[str]:
        """What Enter would select: exact, else sole, else first candidate."""
        if not self.buffer:
            return None
        if self.exact:
            return self.exact
        if self.sole:
            return self.sole
        return self.candidates[0] if self.candidates else None


def compute_match_state(hints: Sequence[str], buffer: str) -> MatchState:
    """Pure evaluation of `buffer` against `hints` (case-insensitive, order kept)."""
    buf = buffer.lower()
    if not buf:
        return MatchState(buffer, MatchPhase.IDLE, tuple(hints))

    candidates: List[str] = []
    exact: Optional[str] = None
    next_char: Optional[str] = None

    for hint in hints:
        low = hint.lower()
        if not low.startswith(buf):
            continue
        candidates.append(hint)
        if low == buf:
            exact = hint
        elif next_char is None:
            next_char = low[len(buf)]

    if not candidates:
        return MatchState(buffer, MatchPhase.NO_MATCH)

    sole = candidates[0] if len(candidates) == 1 else None
    if exact is not None:
        phase = MatchPhase.RESOLVED_SOLE if sole else MatchPhase.RESOLVED_EXACT
    else:
        phase = MatchPhase.MATCHING

    return MatchState(buffer, phase, tuple(candidates), exact, next_char, sole)


class MatchEngine:
    """
    Buffer + state machine for one hint session.

    push()/pop() mutate the buffer without evaluating, so a caller can batch
    several keys before refresh(). type_char()/backspace() do both.
    A key outside the alphabet, or one that would leave no candidate, is not
    added to the buffer; on_feedback receives a NoMatch instead.
    """

    def __init__(
        self,
        hints: Sequence[str] = (),
        alphabet: str = "",
        on_select: Optional[Callable[[str], None]] = None,
        on_feedback: Optional[Callable[[NoMatch], None]] = None,
    ):
        self._on_select = on_select
        self._on_feedback = on_feedback
        self.reset(hints, alphabet)

    def reset(self, hints: Sequence[str], alphabet: str = "") -> MatchState:
        """New hint set: empty buffer, unlocked, idle."""
        self._hints: List[str] = list(hints)
        self.alphabet = (alphabet or "").lower()
        self._buffer = ""
        self._locked = False
        self._selected: Optional[str] = None
        self._dirty = False
        self._state = compute_match_state(self._hints, "")
        return self._state

    # read-only views ------------------------------------------------------------
    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def hints(self) -> Tuple[str, ...]:
        return tuple(self._hints)

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    @property
    def dirty(self) -> bool:
        """Buffer changed since the last refresh()."""
        return self._dirty

    def accepts(self, ch: str) -> bool:
        # an empty alphabet lets any key through
        return not self.alphabet or ch in self.alphabet

    # buffer mutations -----------------------------------------------------------
    def push(self, ch: str) -> bool:
        """Append one key. Returns False (and signals feedback) when rejected."""
        if self._locked or len(ch) != 1:
            return False
        if self._dirty and compute_match_state(self._hints, self._buffer).phase == MatchPhase.RESOLVED_SOLE:
            # keys typed before a pending sole match was evaluated are dropped
            self.refresh()
            return False

        low = ch.lower()
        if not self.accepts(low):
            self._feedback(NoMatch(self._buffer, ch, rejected=True))
            return False

        extended = self._buffer + low
        if not any(h.lower().startswith(extended) for h in self._hints):
            self._state = replace(self._state, phase=MatchPhase.NO_MATCH, candidates=())
            self._feedback(NoMatch(extended, low))
            return False

        self._buffer = extended
        self._dirty = True
        return True

    def pop(self) -> bool:
        """Drop the last key. False when locked or already empty."""
        if self._locked or not self._buffer:
            return False
        self._buffer = self._buffer[:-1]
        self._dirty = True
        return True

    # evaluation -----------------------------------------------------------------
    def refresh(self) -> MatchState:
        """Recompute the state; a sole exact match selects itself."""
        if self._locked:
            return self._state
        self._state = compute_match_state(self._hints, self._buffer)
        self._dirty = False
        if self._state.phase == MatchPhase.RESOLVED_SOLE:
            self._emit(self._state.exact)
        return self._state

    def type_char(self, ch: str) -> MatchState:
        if self.push(ch):
            self.refresh()
        return self._state

    def backspace(self) -> MatchState:
        if self.pop():
            self.refresh()
        return self._state

    # selection ------------------------------------------------------------------
    def accept(self) -> Optional[str]:
        """
        Enter: select exact, else sole, else first candidate.
        On an empty buffer this only signals feedback.
        """
        if self._locked:
            return None
        if not self._buffer:
            self._feedback(NoMatch(""))
            return None

        state = self.refresh()
        if self._locked:
            return self._selected

        target = state.confirm_target
        if target is None:
            self._feedback(NoMatch(self._buffer))
            return None
        return self._emit(target)

    def select(self, code: str) -> Optional[str]:
        """Direct selection (a click on a card)."""
        if self._locked:
            return None
        return self._emit(code)

    def _emit(self, code: Optional[str]) -> Optional[str]:
        if code is None or self._locked:
            return None
        self._locked = True
        self._selected = code
        logger.debug("selected hint %r with buffer %r", code, self._buffer)
        if self._on_select:
            self._on_select(code)
        return code

    def _feedback(self, reason: NoMatch) -> None:
        logger.debug("feedback: %s", reason)
        if self._on_feedback:
            self._on_feedback(reason)
