# tui_app.py - Tab EasyMotion terminal application
# -------------------------------------------------------
# Text based UI around the hint engine:
#  - the active editor group as a tab strip
#  - SPACE opens the hint overlay, one card per tab
#  - cards are tinted by usage heat (busy tabs run warm)
#  - type the hint letters to jump; Enter confirms, Esc cancels
#  - usage is persisted so the heat carries over between runs
# The overlay is the presentation side of a session: it only talks to the
# controller through the session channel.
# -------------------------------------------------------

from __future__ import annotations
from typing import List, Optional

from rich.markup import escape
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widget import Widget
from textual.widgets import Footer, Header, Static
from textual import events

from tab_easymotion.controller import LogNotifier, TabEasyMotionController
from tab_easymotion.core.errors import NoMatch
from tab_easymotion.core.hint_registry import HintEntry
from tab_easymotion.core.protocols import KeyValueStore
from tab_easymotion.core.usage_tracker import UsageTracker
from tab_easymotion.core.workbench import Workbench, demo_workbench
from tab_easymotion.session.channel import ChannelEnd
from tab_easymotion.session.hints_panel import TabHintsPanel
from tab_easymotion.session.panel_view import HintPanelView
from tab_easymotion.utils.config_manager import Config
from tab_easymotion.utils.formatting import clamp_heat, heat_color, size_class, usage_caption
from tab_easymotion.utils.logger_utils import Log
from tab_easymotion.utils.usage_store import JsonFileStore

# named keys the overlay handles; everything else goes by character
_NAMED_KEYS = ("escape", "tab", "backspace", "enter")

_LETTER_STYLES = {
    "matched": "bold green",
    "next": "bold reverse yellow",
    "remaining": "bold",
    "inactive": "dim",
}


class HintCard(Widget):
    """
    One tab in the overlay:
     - hint letters coloured by match progress
     - tab title + usage caption
     - border tinted by heat
    """

    def __init__(self, entry: HintEntry, view: HintPanelView):
        super().__init__(classes=f"card {size_class(entry.title)}")
        self.entry = entry
        self.view = view
        heat = clamp_heat(entry.usage_heat)
        self.styles.border = ("round", heat_color(heat))
        self.tooltip = "\n".join(
            line for line in (entry.title, entry.description if entry.description != entry.title else "",
                              usage_caption(entry.usage_count, entry.last_activated_at)) if line
        )

    def render(self) -> Text:
        text = Text()
        for letter, state in self.view.letter_states(self.entry):
            text.append(letter, style=_LETTER_STYLES.get(state, ""))
        text.append("  ")
        text.append(self.entry.title, style="bold" if "match" in self.view.entry_classes(self.entry) else "")
        text.append("\n")
        text.append(usage_caption(self.entry.usage_count, self.entry.last_activated_at), style="dim")
        return text

    def sync_classes(self) -> None:
        classes = self.view.entry_classes(self.entry)
        for name in ("match", "exact", "single", "dimmed"):
            self.set_class(name in classes, name)
        self.refresh()

    def on_click(self) -> None:
        self.view.click(self.entry.hint)


class HintsScreen(Screen):
    """Overlay screen hosting the presentation side of one session."""

    def __init__(self, endpoint: ChannelEnd):
        super().__init__()
        self.view = HintPanelView(endpoint, on_render=self._paint, on_feedback=self._shake)
        self._shown: List[HintEntry] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(id="hints")
        yield Static(id="hint_status")
        yield Footer()

    def on_mount(self) -> None:
        self.run_worker(self._run_view(), exclusive=True)

    async def _run_view(self) -> None:
        await self.view.run()
        # channel closed: selection made, cancelled or superseded
        if self.app.screen is self:
            self.app.pop_screen()

    async def on_key(self, event: events.Key) -> None:
        key = event.key if event.key in _NAMED_KEYS else (event.character or "")
        if len(key) == 1 and not key.isprintable():
            return
        if key and self.view.handle_key(key):
            event.stop()
            event.prevent_default()

    # rendering ---------------------------------------------------------------
    def _paint(self, view: HintPanelView) -> None:
        if not self.is_mounted:
            return
        container = self.query_one("#hints", Container)
        if view.entries != self._shown:
            self._shown = list(view.entries)
            container.remove_children()
            container.mount(*[HintCard(entry, view) for entry in view.entries])
        else:
            for card in container.query(HintCard):
                card.sync_classes()

        detail, actions = view.status()
        self.query_one("#hint_status", Static).update(f"{escape(detail)}   [dim]{escape(actions)}[/dim]")

    def _shake(self, reason: NoMatch) -> None:
        self.app.bell()
        if not self.is_mounted:
            return
        container = self.query_one("#hints", Container)
        container.add_class("shake")
        self.set_timer(0.25, lambda: container.remove_class("shake"))


class TuiNotifier(LogNotifier):
    """Logs like LogNotifier and shows a Textual toast."""

    def __init__(self, app: App):
        super().__init__()
        self.app = app

    def info(self, message: str) -> None:
        super().info(message)
        self.app.notify(message)

    def warning(self, message: str) -> None:
        super().warning(message)
        self.app.notify(message, severity="warning")

    def error(self, message: str) -> None:
        super().error(message)
        self.app.notify(message, severity="error")


class TabStrip(Static):
    """The active group's tabs, active one highlighted."""

    def update_tabs(self, workbench: Workbench) -> None:
        group = workbench.active_group
        if group is None or not group.tabs:
            self.update("[dim]No open tabs[/dim]")
            return
        parts = []
        for tab in group.tabs:
            label = escape(tab.label)
            parts.append(f"[reverse b]{label}[/reverse b]" if tab.is_active else label)
        self.update("  │  ".join(parts))


# Main Application -----------------------------------------------------------------
class TabEasyMotionApp(App):
    """
    Wires the workbench, usage tracker, config and controller together.
    SPACE presents hints; the chosen tab becomes active in the workbench.
    """

    CSS = """
    #hints { layout: grid; grid-size: 3; grid-gutter: 1; height: auto; }
    #hints.shake { offset-x: 1; }
    .card { height: 4; padding: 0 1; }
    .card.dimmed { opacity: 40%; }
    .card.exact { background: $boost; }
    .card.single { background: $panel; }
    .size-lg, .size-xl { column-span: 2; }
    #tabs { padding: 1 2; }
    #hint_status, #status { dock: bottom; height: 1; padding: 0 1; }
    """

    BINDINGS = [
        ("space", "present_hints", "Jump to tab"),
        ("ctrl+r", "reload_config", "Reload config"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        workbench: Optional[Workbench] = None,
        config: Optional[Config] = None,
        store: Optional[KeyValueStore] = None,
    ):
        super().__init__()
        self.workbench = workbench or demo_workbench()
        self.config = config or Config()
        settings = self.config.settings()

        self.tracker = UsageTracker(store if store is not None else JsonFileStore())
        self.tracker.attach(self.workbench)
        self.panel = TabHintsPanel(self._launch_view, theme_kind=settings.theme)
        self.controller = TabEasyMotionController(
            self.workbench, self.panel, self.tracker, self.config, notifier=TuiNotifier(self)
        )
        self.workbench.on_tab_activated(lambda tab, opened: self._refresh_tabs())

    # UI --------------------------------------------------------------------
    def compose(self) -> ComposeResult:
        yield Header()
        yield TabStrip(id="tabs")
        yield Static("[dim]SPACE: show hints[/dim]", id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Tab EasyMotion"
        self._refresh_tabs()

    def _refresh_tabs(self) -> None:
        try:
            strip = self.query_one(TabStrip)
        except NoMatches:
            return
        strip.update_tabs(self.workbench)

    def check_action(self, action: str, parameters) -> Optional[bool]:
        # the overlay owns every key while it is open
        if isinstance(self.screen, HintsScreen) and action in ("present_hints", "reload_config", "quit"):
            return False
        return True

    def _launch_view(self, endpoint: ChannelEnd) -> None:
        self.push_screen(HintsScreen(endpoint))

    # Actions ----------------------------------------------------------------------
    def action_present_hints(self) -> None:
        self.run_worker(self._present(), exclusive=True, group="session")

    async def _present(self) -> None:
        descriptor = await self.controller.present_hints()
        status = self.query_one("#status", Static)
        if descriptor is not None:
            status.update(f"[green]Switched to[/green] {escape(descriptor.title)}")
        else:
            status.update("[dim]No tab switched[/dim]")
        self._refresh_tabs()

    def action_reload_config(self) -> None:
        self.config.reload()
        self.query_one("#status", Static).update("[yellow]Config reloaded[/yellow]")

    def on_unmount(self) -> None:
        self.controller.dispose()
        Log.info("tui closed")


if __name__ == "__main__":
    TabEasyMotionApp().run()
