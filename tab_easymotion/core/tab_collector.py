# tab_collector.py
# Tab model and the descriptors handed to the hint registry.
# The host owns tab groups; this module only reads them:
#  - which resource a tab shows (per kind)
#  - a human description for the card
#  - a usage key that stays stable across sessions

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlsplit
import os


class TabKind(str, Enum):
    TEXT = "text"
    DIFF = "diff"
    NOTEBOOK = "notebook"
    NOTEBOOK_DIFF = "notebook_diff"
    CUSTOM = "custom"
    WEBVIEW = "webview"
    TERMINAL = "terminal"
    UNKNOWN = "unknown"


# kinds whose resource is the "modified" side of a comparison
_DIFF_KINDS = (TabKind.DIFF, TabKind.NOTEBOOK_DIFF)
# kinds that never carry a resource
_NO_RESOURCE = (TabKind.WEBVIEW, TabKind.TERMINAL)

# usage key prefixes, kept compatible with records already on disk
_KEY_PREFIX = {
    TabKind.TEXT: "text",
    TabKind.DIFF: "diff",
    TabKind.NOTEBOOK: "notebook",
    TabKind.NOTEBOOK_DIFF: "notebookDiff",
    TabKind.CUSTOM: "custom",
    TabKind.WEBVIEW: "webview",
    TabKind.TERMINAL: "terminal",
    TabKind.UNKNOWN: "unknown",
}


@dataclass(eq=False)
class Tab:
    """
    One open tab as the host reports it.
    uri: the document (or the modified side for diffs)
    original: left side of a diff, unused otherwise
    """

    label: str
    kind: TabKind = TabKind.TEXT
    uri: Optional[str] = None
    original: Optional[str] = None
    view_type: str = ""
    is_preview: bool = False
    is_active: bool = False
    group: Optional["TabGroup"] = field(default=None, repr=False)

    @property
    def resource(self) -> Optional[str]:
        if self.kind in _NO_RESOURCE:
            return None
        return self.uri or None

    @property
    def view_column(self) -> Optional[int]:
        return self.group.view_column if self.group else None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Tab":
        try:
            kind = TabKind(d.get("kind", "text"))
        except ValueError:
            kind = TabKind.UNKNOWN
        return cls(
            label=str(d.get("label") or d.get("title") or ""),
            kind=kind,
            uri=d.get("uri"),
            original=d.get("original"),
            view_type=str(d.get("view_type", "")),
            is_preview=bool(d.get("is_preview", False)),
            is_active=bool(d.get("is_active", False)),
        )


@dataclass(eq=False)
class TabGroup:
    """An editor group: ordered tabs in one view column."""

    view_column: Optional[int]
    tabs: List[Tab] = field(default_factory=list)

    def __post_init__(self) -> None:
        for tab in self.tabs:
            tab.group = self

    @property
    def active_tab(self) -> Optional[Tab]:
        for tab in self.tabs:
            if tab.is_active:
                return tab
        return None

    def add(self, tab: Tab) -> Tab:
        tab.group = self
        self.tabs.append(tab)
        return tab


@dataclass(frozen=True)
class TabDescriptor:
    """What the registry pairs with a hint code."""

    id: str
    index: int
    title: str
    description: str
    resource: Optional[str]
    tab: Tab = field(compare=False, repr=False)

    @property
    def kind(self) -> TabKind:
        return self.tab.kind

    @property
    def usage_key(self) -> str:
        return usage_key(self.tab)


# helpers -----------------------------------------------------------------
def _column(tab: Tab) -> str:
    col = tab.view_column
    return "unknown" if col is None else str(col)


def usage_key(tab: Tab) -> str:
    """Stable identity of a tab for the usage tracker."""
    prefix = _KEY_PREFIX.get(tab.kind, "unknown")
    col = _column(tab)
    if tab.kind == TabKind.CUSTOM:
        return f"{prefix}:{col}:{tab.view_type}:{tab.uri or ''}"
    if tab.kind in (TabKind.WEBVIEW, TabKind.TERMINAL, TabKind.UNKNOWN) or not tab.uri:
        return f"{prefix}:{col}:{tab.label}"
    return f"{prefix}:{col}:{tab.uri}"


def format_description(uri: str) -> str:
    """
    Short description for a resource:
     - untitled buffers get a fixed label
     - virtual file systems keep the full uri
     - file uris (and bare paths) become normalised paths
    """
    parts = urlsplit(uri)
    scheme = parts.scheme.lower()

    # "C:\\x" parses as scheme "c"
    if len(scheme) <= 1:
        return os.path.normpath(uri)
    if scheme == "untitled":
        return "Untitled"
    if scheme in ("vscode-vfs", "vscode-userdata"):
        return uri
    if scheme == "file":
        path = unquote(parts.path)
        return os.path.normpath(path) if path else uri
    return uri


def describe(tab: Tab) -> str:
    res = tab.resource
    return format_description(res) if res else tab.label


def collect_tabs(group: Optional[TabGroup]) -> List[TabDescriptor]:
    """Descriptors for every tab in `group`, in tab order."""
    if group is None:
        return []

    col = "unknown" if group.view_column is None else str(group.view_column)
    return [
        TabDescriptor(
            id=f"{col}:{index}",
            index=index,
            title=tab.label,
            description=describe(tab),
            resource=tab.resource,
            tab=tab,
        )
        for index, tab in enumerate(group.tabs)
    ]


def collect_active_group_tabs(source) -> List[TabDescriptor]:
    """Descriptors for the host's active group (source: anything with .active_group)."""
    return collect_tabs(getattr(source, "active_group", None))
