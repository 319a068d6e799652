# tests/test_session.py
# channel, core-side panel and presentation-side view working together

import asyncio

import pytest

from tab_easymotion.core.hint_registry import HintEntry
from tab_easymotion.core.match_engine import MatchPhase
from tab_easymotion.session.channel import ChannelClosed, MessageChannel
from tab_easymotion.session.hints_panel import TabHintsPanel
from tab_easymotion.session.messages import (
    Cancel,
    Ready,
    Select,
    UnknownMessage,
    UpdateEntries,
    UpdatePayload,
    decode,
    encode,
)
from tab_easymotion.session.panel_view import HintPanelView


def make_entries(*codes):
    return [HintEntry(f"1:{i}", code, f"tab{i}.py", f"/w/tab{i}.py", i, "t") for i, code in enumerate(codes)]


async def settle(rounds: int = 20) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class ViewHarness:
    """Launcher that runs a HintPanelView for every channel the panel opens."""

    def __init__(self, frame_interval: float = 0.001):
        self.views = []
        self.tasks = []
        self.frame_interval = frame_interval

    def __call__(self, endpoint):
        view = HintPanelView(endpoint, frame_interval=self.frame_interval)
        self.views.append(view)
        self.tasks.append(asyncio.ensure_future(view.run()))

    @property
    def view(self) -> HintPanelView:
        return self.views[-1]


# messages / channel ---------------------------------------------------------------
def test_message_wire_format():
    payload = UpdatePayload(make_entries("a"), "as", "light")
    raw = encode(UpdateEntries(payload))
    assert raw["type"] == "updateEntries"
    assert raw["payload"]["themeKind"] == "light"
    assert raw["payload"]["entries"][0]["firstLetter"] == "t"
    assert decode(raw) == UpdateEntries(payload)
    assert encode(Select("ab")) == {"type": "select", "hint": "ab"}


def test_decode_rejects_unknown():
    with pytest.raises(UnknownMessage):
        decode({"type": "explode"})
    with pytest.raises(UnknownMessage):
        decode("ready")


def test_channel_keeps_order_and_copies():
    async def scenario():
        channel = MessageChannel()
        entries = make_entries("a", "s")
        channel.core.post(UpdateEntries(UpdatePayload(entries, "as")))
        channel.view.post(Ready())
        channel.view.post(Select("s"))

        assert await channel.core.receive() == Ready()
        assert await channel.core.receive() == Select("s")
        got = await channel.view.receive()
        assert got.payload.entries == entries
        assert got.payload.entries[0] is not entries[0]

    asyncio.run(scenario())


def test_channel_skips_unknown_messages():
    async def scenario():
        channel = MessageChannel()
        channel._to_core.put_nowait({"type": "bogus"})
        channel.view.post(Cancel())
        assert await channel.core.receive() == Cancel()

    asyncio.run(scenario())


def test_closed_channel():
    async def scenario():
        channel = MessageChannel()
        channel.close()
        assert channel.core.post(Ready()) is False
        with pytest.raises(ChannelClosed):
            await channel.view.receive()
        # every waiter sees the close
        with pytest.raises(ChannelClosed):
            await channel.view.receive()
        assert [m async for m in channel.core] == []

    asyncio.run(scenario())


# panel + view ---------------------------------------------------------------------
def test_typed_hint_resolves_capture():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        task = asyncio.ensure_future(panel.capture_selection(make_entries("a", "s", "d"), "asd"))
        await settle()

        view = harness.view
        assert [e.hint for e in view.entries] == ["a", "s", "d"]
        view.handle_key("s")
        result = await asyncio.wait_for(task, 1)

        assert result == "s"
        assert not panel.is_open
        await asyncio.wait_for(harness.tasks[-1], 1)

    asyncio.run(scenario())


def test_enter_confirms_exact_with_longer_sibling():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        task = asyncio.ensure_future(panel.capture_selection(make_entries("a", "s", "aa"), "as"))
        await settle()

        view = harness.view
        view.handle_key("a")
        await asyncio.sleep(0.01)
        assert view.state.phase == MatchPhase.RESOLVED_EXACT
        assert not task.done()

        view.handle_key("enter")
        assert await asyncio.wait_for(task, 1) == "a"

    asyncio.run(scenario())


def test_escape_resolves_none():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        task = asyncio.ensure_future(panel.capture_selection(make_entries("a", "s"), "as"))
        await settle()
        harness.view.handle_key("escape")
        assert await asyncio.wait_for(task, 1) is None
        assert not panel.is_open

    asyncio.run(scenario())


def test_click_selects():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        task = asyncio.ensure_future(panel.capture_selection(make_entries("a", "s"), "as"))
        await settle()
        harness.view.click("s")
        harness.view.click("a")  # locked after the first pick
        assert await asyncio.wait_for(task, 1) == "s"

    asyncio.run(scenario())


def test_dispose_resolves_pending_capture_once():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        task = asyncio.ensure_future(panel.capture_selection(make_entries("a"), "a"))
        await settle()
        panel.dispose()
        panel.dispose()
        assert await asyncio.wait_for(task, 1) is None
        # the view loop ends once the channel is gone
        await asyncio.wait_for(harness.tasks[-1], 1)

    asyncio.run(scenario())


def test_view_closing_channel_resolves_none():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        task = asyncio.ensure_future(panel.capture_selection(make_entries("a"), "a"))
        await settle()
        harness.view.endpoint.close()
        assert await asyncio.wait_for(task, 1) is None
        assert not panel.is_open

    asyncio.run(scenario())


def test_new_session_supersedes_pending_one():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        first = asyncio.ensure_future(panel.capture_selection(make_entries("a", "s"), "as"))
        await settle()
        second = asyncio.ensure_future(panel.capture_selection(make_entries("d", "f"), "df"))
        await settle()

        assert await asyncio.wait_for(first, 1) is None
        # the same view is reused and now shows the new set
        assert len(harness.views) == 1
        assert [e.hint for e in harness.view.entries] == ["d", "f"]

        harness.view.handle_key("f")
        assert await asyncio.wait_for(second, 1) == "f"

    asyncio.run(scenario())


def test_request_update_redelivers_latest_payload():
    async def scenario():
        harness = ViewHarness()
        panel = TabHintsPanel(harness)
        task = asyncio.ensure_future(panel.capture_selection(make_entries("a", "aa"), "a"))
        await settle()
        view = harness.view
        view.handle_key("a")
        await asyncio.sleep(0.01)
        assert view.buffer == "a"

        view.request_update()
        await settle()
        # full replacement: buffer cleared
        assert view.buffer == ""
        assert panel.latest_payload.alphabet == "a"
        panel.dispose()
        await task

    asyncio.run(scenario())


# view details ---------------------------------------------------------------------
@pytest.fixture
def view():
    channel = MessageChannel()
    v = HintPanelView(channel.view)
    v.apply_payload(UpdatePayload(make_entries("a", "sd", "sf", "df"), "asdf"))
    return v


def test_refresh_is_debounced_per_frame():
    async def scenario():
        channel = MessageChannel()
        view = HintPanelView(channel.view, frame_interval=0.02)
        view.apply_payload(UpdatePayload(make_entries("a", "sd", "sf"), "asdf"))

        view.handle_key("s")
        view.handle_key("d")
        assert view.refresh_count == 0
        await asyncio.sleep(0.1)

        assert view.refresh_count == 1
        assert await channel.core.receive() == Select("sd")

    asyncio.run(scenario())


def test_without_event_loop_each_key_refreshes(view):
    view.handle_key("s")
    assert view.refresh_count == 1
    assert view.state.candidates == ("sd", "sf")


def test_enter_flushes_pending_keys():
    async def scenario():
        channel = MessageChannel()
        view = HintPanelView(channel.view, frame_interval=10)
        view.apply_payload(UpdatePayload(make_entries("a", "sd", "sf"), "asdf"))
        view.handle_key("s")
        view.handle_key("enter")
        assert await channel.core.receive() == Select("sd")

    asyncio.run(scenario())


def test_letter_states_and_classes(view):
    view.handle_key("s")
    sd, df = view.entries[1], view.entries[3]
    assert view.letter_states(sd) == [("S", "matched"), ("D", "next")]
    assert view.letter_states(df) == [("D", "inactive"), ("F", "inactive")]
    assert view.entry_classes(sd) == ["match"]
    assert view.entry_classes(df) == ["dimmed"]


def test_idle_letters_and_status(view):
    assert view.letter_states(view.entries[1]) == [("S", "remaining"), ("D", "remaining")]
    assert view.entry_classes(view.entries[1]) == []
    detail, actions = view.status()
    assert "Type a hint" in detail
    assert actions == "Esc cancel"


def test_status_while_matching(view):
    view.handle_key("s")
    detail, actions = view.status()
    assert "Input: S" in detail
    assert "matches: 2" in detail
    assert "next key: D" in detail
    assert "Enter" in actions


def test_feedback_on_rejected_key():
    reasons = []
    channel = MessageChannel()
    view = HintPanelView(channel.view, on_feedback=reasons.append)
    view.apply_payload(UpdatePayload(make_entries("a", "s"), "as"))
    assert view.handle_key("z")
    assert view.buffer == ""
    assert reasons and reasons[0].rejected


def test_tab_key_swallowed(view):
    assert view.handle_key("tab")
    assert view.buffer == ""
    assert not view.handle_key("f5")


def test_keys_after_sole_match_in_same_frame_are_dropped():
    async def scenario():
        reasons = []
        channel = MessageChannel()
        view = HintPanelView(channel.view, on_feedback=reasons.append, frame_interval=0.05)
        view.apply_payload(UpdatePayload(make_entries("b", "a"), "ab"))

        view.handle_key("b")
        view.handle_key("a")
        await asyncio.sleep(0.1)

        assert await channel.core.receive() == Select("b")
        assert channel.pending("core") == 0
        assert reasons == []

    asyncio.run(scenario())
