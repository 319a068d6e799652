# channel.py
# Ordered, at-most-once message channel between the core and the presentation side.
# Two asyncio queues, one per direction. Messages are encoded to dicts and
# deep-copied on post, so no mutable object is shared across the boundary.

from __future__ import annotations
import asyncio
import logging
from typing import AsyncIterator, Optional

from tab_easymotion.session.messages import Message, UnknownMessage, copy_wire, decode, encode

logger = logging.getLogger(__name__)

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised by receive() once the channel has been closed."""


class ChannelEnd:
    """One side of a MessageChannel: post() to the peer, receive() from it."""

    def __init__(self, channel: "MessageChannel", outbox: asyncio.Queue, inbox: asyncio.Queue, name: str):
        self._channel = channel
        self._outbox = outbox
        self._inbox = inbox
        self.name = name

    @property
    def closed(self) -> bool:
        return self._channel.closed

    def post(self, message: Message) -> bool:
        """Queue a message for the peer. Fire-and-forget; False once closed."""
        if self._channel.closed:
            logger.debug("%s: dropped %s on closed channel", self.name, message.type)
            return False
        self._outbox.put_nowait(copy_wire(encode(message)))
        return True

    async def receive(self) -> Message:
        """Next decodable message from the peer; unknown ones are skipped."""
        while True:
            raw = await self._inbox.get()
            if raw is _CLOSED:
                # leave the marker for any other waiter
                self._inbox.put_nowait(_CLOSED)
                raise ChannelClosed(self.name)
            try:
                return decode(raw)
            except UnknownMessage as e:
                logger.warning("%s: %s", self.name, e)

    def __aiter__(self) -> AsyncIterator[Message]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Message]:
        while True:
            try:
                yield await self.receive()
            except ChannelClosed:
                return

    def close(self) -> None:
        self._channel.close()


class MessageChannel:
    """
    Bidirectional channel.
        channel = MessageChannel()
        channel.core.post(UpdateEntries(...))
        msg = await channel.view.receive()
    """

    def __init__(self) -> None:
        self._to_view: asyncio.Queue = asyncio.Queue()
        self._to_core: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.core = ChannelEnd(self, self._to_view, self._to_core, "core")
        self.view = ChannelEnd(self, self._to_core, self._to_view, "view")

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._to_view.put_nowait(_CLOSED)
        self._to_core.put_nowait(_CLOSED)

    def pending(self, side: Optional[str] = None) -> int:
        """Messages waiting for `side` ("core"/"view"), or both."""
        if side == "core":
            return self._to_core.qsize()
        if side == "view":
            return self._to_view.qsize()
        return self._to_core.qsize() + self._to_view.qsize()
