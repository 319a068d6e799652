# workbench.py
# In-memory host: editor groups, active tabs and activation events.
# Stands in for the editor window when running the CLI/TUI and in tests.
# Implements TabSource, TabActivator and ActivationEvents.

from __future__ import annotations
import json
from typing import Any, Callable, Dict, List, Optional

from tab_easymotion.core.errors import UnsupportedItemKind
from tab_easymotion.core.tab_collector import Tab, TabDescriptor, TabGroup, TabKind

Listener = Callable[..., None]

# kinds that are focused in place when revealed
_REVEALABLE = (
    TabKind.TEXT,
    TabKind.DIFF,
    TabKind.NOTEBOOK,
    TabKind.NOTEBOOK_DIFF,
    TabKind.CUSTOM,
    TabKind.TERMINAL,
)


class Workbench:
    """
    Tab groups plus the events a real editor would fire:
     - tab_activated(tab, opened)
     - group_changed(group)
     - editor_changed(uri)  (text-like tabs only)
    """

    def __init__(self, groups: Optional[List[TabGroup]] = None, active_column: Optional[int] = None):
        self._groups: List[TabGroup] = list(groups or [])
        self._active: Optional[TabGroup] = None
        self._listeners: Dict[str, List[Listener]] = {
            "tab_activated": [],
            "group_changed": [],
            "editor_changed": [],
        }
        for group in self._groups:
            if group.view_column == active_column:
                self._active = group
        if self._active is None and self._groups:
            self._active = self._groups[0]

    # TabSource ----------------------------------------------------------------
    @property
    def groups(self) -> List[TabGroup]:
        return list(self._groups)

    @property
    def active_group(self) -> Optional[TabGroup]:
        return self._active

    # ActivationEvents ---------------------------------------------------------
    def on_tab_activated(self, listener: Listener) -> Callable[[], None]:
        return self._subscribe("tab_activated", listener)

    def on_group_changed(self, listener: Listener) -> Callable[[], None]:
        return self._subscribe("group_changed", listener)

    def on_editor_changed(self, listener: Listener) -> Callable[[], None]:
        return self._subscribe("editor_changed", listener)

    def _subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def _fire(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(*args)

    # mutations ----------------------------------------------------------------
    def add_group(self, group: TabGroup) -> TabGroup:
        self._groups.append(group)
        if self._active is None:
            self._active = group
        return group

    def focus_group(self, group: TabGroup) -> None:
        if group is self._active:
            return
        self._active = group
        self._fire("group_changed", group)

    def activate(self, tab: Tab, opened: bool = False) -> None:
        """Make `tab` the active tab of its group and focus that group."""
        group = tab.group
        if group is None:
            raise ValueError(f"tab '{tab.label}' does not belong to a group")
        for other in group.tabs:
            other.is_active = other is tab

        self.focus_group(group)
        self._fire("tab_activated", tab, opened)
        if tab.kind in (TabKind.TEXT, TabKind.DIFF, TabKind.NOTEBOOK, TabKind.NOTEBOOK_DIFF, TabKind.CUSTOM):
            self._fire("editor_changed", tab.resource)

    def open_tab(self, group: TabGroup, tab: Tab) -> Tab:
        group.add(tab)
        self.activate(tab, opened=True)
        return tab

    def close_tab(self, tab: Tab) -> None:
        group = tab.group
        if group is None or tab not in group.tabs:
            return
        was_active = tab.is_active
        group.tabs.remove(tab)
        tab.group = None
        if was_active and group.tabs:
            self.activate(group.tabs[-1])

    # TabActivator -------------------------------------------------------------
    def reveal(self, descriptor: TabDescriptor) -> None:
        """
        Focus the tab behind `descriptor`.
        Webviews and resource-less unknown tabs cannot be focused from here.
        """
        tab = descriptor.tab
        if tab.kind in _REVEALABLE:
            self.activate(tab)
            return
        if tab.kind == TabKind.WEBVIEW:
            raise UnsupportedItemKind("webview", descriptor.title)
        if descriptor.resource:
            self.activate(self._find_by_resource(descriptor.resource) or tab)
            return
        raise UnsupportedItemKind(tab.kind.value, descriptor.title)

    def _find_by_resource(self, uri: str) -> Optional[Tab]:
        for group in self._groups:
            for tab in group.tabs:
                if tab.resource == uri:
                    return tab
        return None

    # loading ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Workbench":
        """
        {"active": 1, "groups": [{"view_column": 1, "tabs": [{"label": ..., "kind": ..., "uri": ...}]}]}
        A bare list is read as the tabs of a single group.
        """
        if isinstance(data, list):
            data = {"groups": [{"view_column": 1, "tabs": data}]}
        groups = [
            TabGroup(g.get("view_column"), [Tab.from_dict(t) for t in g.get("tabs", [])])
            for g in data.get("groups", [])
        ]
        return cls(groups, active_column=data.get("active"))

    @classmethod
    def load(cls, path: str) -> "Workbench":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


def demo_workbench() -> Workbench:
    """A small workspace used when no tabs file is given."""
    tabs = [
        Tab("README.md", uri="file:///work/demo/README.md", is_active=True),
        Tab("app.py", uri="file:///work/demo/src/app.py"),
        Tab("models.py", uri="file:///work/demo/src/models.py"),
        Tab("app.py ↔ HEAD", TabKind.DIFF, uri="file:///work/demo/src/app.py", original="git:/work/demo/src/app.py"),
        Tab("analysis.ipynb", TabKind.NOTEBOOK, uri="file:///work/demo/notebooks/analysis.ipynb"),
        Tab("Untitled-1", uri="untitled:Untitled-1"),
        Tab("settings.json", uri="vscode-userdata:/User/settings.json"),
        Tab("Preview README.md", TabKind.WEBVIEW),
        Tab("bash", TabKind.TERMINAL),
        Tab("test_app.py", uri="file:///work/demo/tests/test_app.py", is_preview=True),
    ]
    return Workbench([TabGroup(1, tabs)], active_column=1)
