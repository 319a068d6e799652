# panel_view.py
# Presentation side of a hint session.
# Owns the input buffer (through a MatchEngine), turns keys into buffer edits,
# collapses bursts of edits into one refresh per frame and talks to the core
# only through its channel end. Renderers (TUI, tests) read its state through
# on_render and the entry/letter helpers.

from __future__ import annotations
import asyncio
import logging
from typing import Callable, List, Optional, Tuple

from tab_easymotion.core.errors import NoMatch
from tab_easymotion.core.hint_registry import HintEntry
from tab_easymotion.core.match_engine import MatchEngine, MatchPhase, MatchState
from tab_easymotion.session.channel import ChannelEnd
from tab_easymotion.session.messages import Cancel, Ready, RequestUpdate, Select, UpdateEntries, UpdatePayload

logger = logging.getLogger(__name__)

FRAME_INTERVAL = 1 / 60  # seconds


class HintPanelView:
    """
    Key handling:
      escape    cancel the session
      tab       swallowed
      backspace drop the last key
      enter     confirm (exact, else sole, else first candidate)
      any char  extend the buffer (lower-cased, must be in the alphabet)
    """

    def __init__(
        self,
        endpoint: ChannelEnd,
        *,
        on_render: Optional[Callable[["HintPanelView"], None]] = None,
        on_feedback: Optional[Callable[[NoMatch], None]] = None,
        frame_interval: float = FRAME_INTERVAL,
    ):
        self.endpoint = endpoint
        self.engine = MatchEngine(on_select=self._send_selection, on_feedback=self._feedback)
        self.entries: List[HintEntry] = []
        self.theme_kind = ""
        self.finished = False  # selection sent or cancelled
        self.refresh_count = 0

        self._on_render = on_render
        self._on_feedback = on_feedback
        self._frame_interval = frame_interval
        self._frame: Optional[asyncio.TimerHandle] = None

    # message loop ---------------------------------------------------------------
    async def run(self) -> None:
        """Announce readiness, then apply hint sets until the channel closes."""
        self.endpoint.post(Ready())
        try:
            async for message in self.endpoint:
                if isinstance(message, UpdateEntries):
                    self.apply_payload(message.payload)
        finally:
            self._cancel_frame()

    def apply_payload(self, payload: UpdatePayload) -> None:
        """Full replacement of the hint set: fresh buffer, unlocked."""
        self._cancel_frame()
        self.entries = list(payload.entries)
        self.theme_kind = payload.theme_kind
        self.finished = False
        self.engine.reset([e.hint for e in self.entries], payload.alphabet)
        self._render()

    def request_update(self) -> None:
        self.endpoint.post(RequestUpdate())

    @property
    def state(self) -> MatchState:
        return self.engine.state

    @property
    def buffer(self) -> str:
        return self.engine.buffer

    @property
    def locked(self) -> bool:
        return self.engine.locked or self.finished

    # input ----------------------------------------------------------------------
    def handle_key(self, key: str) -> bool:
        """Returns True when the key was consumed."""
        if self.locked:
            return True

        if key == "escape":
            self.cancel()
            return True
        if key == "tab":
            return True
        if key == "backspace":
            if self.engine.pop():
                self.schedule_refresh()
            return True
        if key == "enter":
            self.flush()
            self.engine.accept()
            self._render()
            return True
        if len(key) == 1:
            if self.engine.push(key):
                self.schedule_refresh()
            else:
                self._render()
            return True
        return False

    def click(self, hint: str) -> None:
        if self.locked:
            return
        self.engine.select(hint)

    def cancel(self) -> None:
        if self.locked:
            return
        self.finished = True
        self._cancel_frame()
        self.endpoint.post(Cancel())

    # frame-debounced refresh -----------------------------------------------------
    def schedule_refresh(self) -> None:
        """Refresh on the next frame; edits before then share one refresh."""
        if self._frame is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.flush()
            return
        self._frame = loop.call_later(self._frame_interval, self._on_frame)

    def _on_frame(self) -> None:
        self._frame = None
        self.flush()

    def _cancel_frame(self) -> None:
        if self._frame is not None:
            self._frame.cancel()
            self._frame = None

    def flush(self) -> None:
        """Apply any pending buffer change now."""
        self._cancel_frame()
        if not self.engine.dirty:
            return
        self.engine.refresh()
        self.refresh_count += 1
        self._render()

    # outgoing -------------------------------------------------------------------
    def _send_selection(self, hint: str) -> None:
        self.finished = True
        self._cancel_frame()
        self.endpoint.post(Select(hint))

    def _feedback(self, reason: NoMatch) -> None:
        if self._on_feedback:
            self._on_feedback(reason)

    def _render(self) -> None:
        if self._on_render:
            self._on_render(self)

    # render helpers -------------------------------------------------------------
    def entry_classes(self, entry: HintEntry) -> List[str]:
        """match / exact / single / dimmed for one card ([] when idle)."""
        state = self.state
        if not state.buffer:
            return []
        if entry.hint not in state.candidates:
            return ["dimmed"]
        classes = ["match"]
        if entry.hint == state.exact:
            classes.append("exact")
        if entry.hint == state.sole:
            classes.append("single")
        return classes

    def letter_states(self, entry: HintEntry) -> List[Tuple[str, str]]:
        """(letter, state) pairs: matched / next / remaining / inactive."""
        state = self.state
        n = len(state.buffer)
        if not n:
            return [(ch.upper(), "remaining") for ch in entry.hint]
        if entry.hint not in state.candidates:
            return [(ch.upper(), "inactive") for ch in entry.hint]
        out = []
        for i, ch in enumerate(entry.hint):
            if i < n:
                out.append((ch.upper(), "matched"))
            elif i == n:
                out.append((ch.upper(), "next"))
            else:
                out.append((ch.upper(), "remaining"))
        return out

    def status(self) -> Tuple[str, str]:
        """(detail, actions) for the status bar."""
        state = self.state
        if not self.buffer:
            return ("Type a hint to jump · click a card to switch.", "Esc cancel")

        count = len(state.candidates)
        next_key = f" · next key: {state.next_char.upper()}" if state.next_char else ""
        if state.phase == MatchPhase.NO_MATCH or count == 0:
            helper = " · no hint matches"
        elif state.exact:
            helper = " · located"
        elif state.sole:
            helper = " · press Enter or keep typing"
        else:
            helper = ""

        detail = f"Input: {self.buffer.upper()} · matches: {count}{next_key}{helper}"
        if state.exact or count == 0:
            actions = "Esc cancel"
        else:
            actions = "Enter confirm  Esc cancel"
        return (detail, actions)
