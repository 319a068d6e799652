"""
controller.py - one hint session end to end

Flow:
  active group tabs -> registry codes -> usage heat -> panel (presentation side)
  -> selected code -> registry lookup -> reveal the tab

Every failure of a session is reported through the Notifier and the controller
returns None; present_hints() never raises the session errors.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape

from tab_easymotion.core.errors import AlphabetExhausted, UnresolvedSelection, UnsupportedItemKind
from tab_easymotion.core.hint_registry import HintEntry, TabHintRegistry
from tab_easymotion.core.protocols import Notifier, TabActivator, TabSource
from tab_easymotion.core.tab_collector import TabDescriptor, collect_active_group_tabs
from tab_easymotion.core.usage_tracker import UsageTracker
from tab_easymotion.session.hints_panel import TabHintsPanel
from tab_easymotion.utils.config_manager import Config, ExtensionSettings
from tab_easymotion.utils.logger_utils import Log

NO_TABS_MESSAGE = "No tabs in the active editor group."


class LogNotifier:
    """Notifier that logs every message and optionally prints it with Rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console
        self.messages: List[tuple] = []

    def _emit(self, level: str, style: str, message: str) -> None:
        self.messages.append((level, message))
        Log.write(message, level)
        if self.console is not None:
            self.console.print(f"[{style}]{escape(message)}[/{style}]")

    def info(self, message: str) -> None:
        self._emit("INFO", "cyan", message)

    def warning(self, message: str) -> None:
        self._emit("WARNING", "yellow", message)

    def error(self, message: str) -> None:
        self._emit("ERROR", "red", message)


class TabEasyMotionController:
    """Owns the registry for the current session and wires the collaborators together."""

    def __init__(
        self,
        source: TabSource,
        panel: TabHintsPanel,
        tracker: UsageTracker,
        config: Config,
        *,
        activator: Optional[TabActivator] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.registry = TabHintRegistry()
        self.source = source
        self.activator: TabActivator = activator or source  # type: ignore[assignment]
        self.panel = panel
        self.tracker = tracker
        self.config = config
        self.notifier: Notifier = notifier or LogNotifier()
        self.settings: ExtensionSettings = config.settings()
        self._session = 0
        self._unsubscribe: Optional[Callable[[], None]] = config.on_change(self._on_config_changed)

    def _on_config_changed(self, settings: ExtensionSettings) -> None:
        self.settings = settings
        Log.info(f"[Config] alphabet={settings.hint_alphabet!r} max_length={settings.max_hint_length}")

    # session ----------------------------------------------------------------
    async def present_hints(self) -> Optional[TabDescriptor]:
        """Run one session; returns the revealed tab, or None."""
        self._session += 1
        session = self._session
        try:
            entries = self.prepare_entries()
            if not entries:
                return None

            selected = await self.panel.capture_selection(entries, self.settings.hint_alphabet)
            if not selected:
                Log.debug("session closed without a selection")
                return None

            return self.handle_hint_selection(selected)
        finally:
            # a newer session may own the registry by now
            if session == self._session:
                self.registry.clear()

    def prepare_entries(self) -> Optional[List[HintEntry]]:
        tabs = collect_active_group_tabs(self.source)
        if not tabs:
            self.notifier.info(NO_TABS_MESSAGE)
            return None

        with Log.time_block("prepare_entries"):
            try:
                self.registry.rebuild(tabs, self.settings.hint_alphabet, self.settings.max_hint_length)
            except AlphabetExhausted as e:
                self.notifier.error(str(e))
                return None
            snapshot = self.tracker.snapshot(tabs)

        entries = []
        for entry in self.registry.get_view_entries():
            usage = snapshot.get(entry.id)
            if usage:
                entry = entry.with_usage(usage["count"], usage["heat"], usage["lastActivatedAt"])
            entries.append(entry)
        return entries

    def handle_hint_selection(self, hint: str) -> Optional[TabDescriptor]:
        descriptor = self.registry.resolve_by_code(hint)
        if descriptor is None:
            self.notifier.warning(str(UnresolvedSelection(hint)))
            return None

        try:
            self.activator.reveal(descriptor)
        except UnsupportedItemKind as e:
            self.notifier.warning(str(e))
            return None

        Log.info(f"revealed '{descriptor.title}' via hint '{hint}'")
        return descriptor

    def dispose(self) -> None:
        self.registry.clear()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.tracker.dispose()
        self.panel.dispose()
