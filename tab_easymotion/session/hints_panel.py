# tab_easymotion/session/hints_panel.py
"""
TabHintsPanel
Core side of a hint session.
 - opens a channel and launches the presentation side on first use
 - delivers the hint set (again on ready/requestUpdate)
 - turns select/cancel into the result of capture_selection()
 - closing the panel resolves an outstanding selection with None, exactly once
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable, Optional

from tab_easymotion.core.hint_registry import HintEntry
from tab_easymotion.session.channel import ChannelEnd, MessageChannel
from tab_easymotion.session.messages import (
    Cancel,
    Message,
    Ready,
    RequestUpdate,
    Select,
    UpdateEntries,
    UpdatePayload,
)

logger = logging.getLogger(__name__)

# Called with the view end of a fresh channel; starts the presentation side.
ViewLauncher = Callable[[ChannelEnd], Any]


class TabHintsPanel:
    """
    Public API:
      capture_selection(entries, alphabet) -> code | None
      handle_message(message)
      dispose()
    """

    def __init__(self, launch_view: ViewLauncher, theme_kind: str = "dark"):
        self._launch_view = launch_view
        self.theme_kind = theme_kind
        self._channel: Optional[MessageChannel] = None
        self._listener: Optional[asyncio.Task] = None
        self._future: Optional[asyncio.Future] = None
        self._latest: Optional[UpdatePayload] = None

    @property
    def is_open(self) -> bool:
        return self._channel is not None

    @property
    def latest_payload(self) -> Optional[UpdatePayload]:
        return self._latest

    async def capture_selection(self, entries: Iterable[HintEntry], alphabet: str) -> Optional[str]:
        """Show `entries` and wait for the user's pick (None = no selection)."""
        payload = UpdatePayload(list(entries), alphabet, self.theme_kind)
        self._latest = payload

        # a new session supersedes one still waiting
        self._resolve(None)

        if self._channel is None:
            self._open()

        future = asyncio.get_running_loop().create_future()
        self._future = future
        self._post_update(payload)
        return await future

    # channel plumbing -----------------------------------------------------------
    def _open(self) -> None:
        channel = MessageChannel()
        self._channel = channel
        self._listener = asyncio.ensure_future(self._listen(channel))
        self._launch_view(channel.view)

    async def _listen(self, channel: MessageChannel) -> None:
        async for message in channel.core:
            self.handle_message(message)
        # the presentation side went away on its own
        if channel is self._channel:
            logger.debug("view closed the channel")
            self.dispose()

    def _post_update(self, payload: UpdatePayload) -> None:
        if self._channel is not None:
            self._channel.core.post(UpdateEntries(payload))

    def handle_message(self, message: Message) -> None:
        if isinstance(message, (Ready, RequestUpdate)):
            if self._latest is not None:
                self._post_update(self._latest)
        elif isinstance(message, Select):
            self._resolve(message.hint)
            self.dispose()
        elif isinstance(message, Cancel):
            self._resolve(None)
            self.dispose()
        else:
            logger.debug("ignoring %s on core side", getattr(message, "type", message))

    def _resolve(self, hint: Optional[str]) -> None:
        future, self._future = self._future, None
        if future is not None and not future.done():
            future.set_result(hint)

    def dispose(self) -> None:
        """Close the presentation side; a pending capture resolves to None."""
        self._resolve(None)
        channel, self._channel = self._channel, None
        self._listener = None
        if channel is not None:
            channel.close()
