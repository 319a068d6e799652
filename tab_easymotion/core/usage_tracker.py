# tab_easymotion/core/usage_tracker.py
"""
UsageTracker
Per-tab activation history and the heat score derived from it.
 - counts + last activation time per usage key
 - heat = 0.6 * count share + 0.4 * recency decay, clamped to [0, 1]
 - keeps at most 250 records (most recently activated win)
 - persisted through an injected KeyValueStore, fire-and-forget
"""

from __future__ import annotations

import math
import time
from typing import Callable, Dict, Iterable, List, Optional

from tab_easymotion.core.protocols import (
    ActivationEvents,
    KeyValueStore,
    StoredUsage,
    UsageSnapshot,
)
from tab_easymotion.core.tab_collector import Tab, TabDescriptor, usage_key
from tab_easymotion.utils.logger_utils import Log

STORAGE_KEY = "tabEasyMotion.tabUsage.v1"
STORAGE_LIMIT = 250
RECENCY_HALF_LIFE_MS = 30 * 60 * 1000  # 30 minutes
COUNT_WEIGHT = 0.6
RECENCY_WEIGHT = 0.4


def now_ms() -> int:
    return int(time.time() * 1000)


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def recency_score(timestamp: int, now: int, half_life: float = RECENCY_HALF_LIFE_MS) -> float:
    """exp(-age / half_life); 0 when there was never an activation."""
    if not timestamp:
        return 0.0
    age = max(0, now - timestamp)
    return math.exp(-age / half_life)


def heat_score(count: int, max_count: int, last_activated_at: int, now: int) -> float:
    count_score = count / max_count if max_count > 0 else 0.0
    heat = COUNT_WEIGHT * count_score + RECENCY_WEIGHT * recency_score(last_activated_at, now)
    return min(1.0, max(0.0, heat))


class UsageTracker:
    """
    Tracks how often and how recently each tab was activated.
    Public API:
      record(key, force=False)
      record_tab(tab, force=False)
      snapshot(descriptors)
      attach(host)
      records()
      dispose()
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        *,
        clock: Callable[[], int] = now_ms,
        limit: int = STORAGE_LIMIT,
        verbose: bool = False,
    ):
        self._store = store
        self._clock = clock
        self.limit = limit
        self.verbose = bool(verbose)

        # usage key -> {"count", "lastActivatedAt"}; insertion order is irrelevant
        self._usage: Dict[str, StoredUsage] = {}
        self._last_recorded_key: Optional[str] = None
        self._unsubscribe: List[Callable[[], None]] = []
        self._host: Optional[ActivationEvents] = None

        self._load()

    # Event recording --------------------------------------------------------------
    def record(self, key: str, force: bool = False) -> bool:
        """
        Count one activation of `key`.
        Repeated notifications for the key recorded last are ignored unless force=True.
        Returns True when a record was written.
        """
        if not force and key == self._last_recorded_key:
            return False
        self._last_recorded_key = key

        previous = self._usage.get(key)
        self._usage[key] = {
            "count": (previous["count"] if previous else 0) + 1,
            "lastActivatedAt": self._clock(),
        }
        self._trim()
        self._persist()

        if self.verbose:
            Log.debug(f"[Usage] {key} -> {self._usage.get(key)}")
        return True

    def record_tab(self, tab: Tab, force: bool = False) -> bool:
        return self.record(usage_key(tab), force=force)

    # Host wiring ------------------------------------------------------------------
    def attach(self, host: ActivationEvents, bootstrap: bool = True) -> None:
        """
        Listen to host activation events and bootstrap the active tab of every group.
        host also exposes `groups`, used to map an editor uri back to its tab.
         - tab became active: record (de-duplicated)
         - tab opened active / group changed: record with force
         - editor changed: find the tab showing that uri and record it
        """
        self._host = host
        if bootstrap:
            for group in host.groups:
                if group.active_tab is not None:
                    self.record_tab(group.active_tab, force=True)

        self._unsubscribe.append(host.on_tab_activated(self._on_tab_activated))
        self._unsubscribe.append(host.on_group_changed(self._on_group_changed))
        self._unsubscribe.append(host.on_editor_changed(self._on_editor_changed))

    def _on_tab_activated(self, tab: Tab, opened: bool = False) -> None:
        self.record_tab(tab, force=opened)

    def _on_group_changed(self, group) -> None:
        if group.active_tab is not None:
            self.record_tab(group.active_tab, force=True)

    def _on_editor_changed(self, uri: Optional[str]) -> None:
        if not uri:
            return
        tab = self._find_tab_for_uri(uri)
        if tab is not None:
            self.record_tab(tab)

    def _find_tab_for_uri(self, uri: str) -> Optional[Tab]:
        if self._host is None:
            return None
        for group in self._host.groups:
            for tab in group.tabs:
                if tab.resource == uri:
                    return tab
        return None

    def dispose(self) -> None:
        while self._unsubscribe:
            self._unsubscribe.pop()()
        self._usage.clear()

    # Stats/queries -------------------------------------------------------------------------
    def snapshot(self, descriptors: Iterable[TabDescriptor]) -> UsageSnapshot:
        """
        Usage of each descriptor keyed by descriptor id.
        count share is relative to the busiest tab in this set, not globally.
        """
        items = list(descriptors)
        out: UsageSnapshot = {}
        if not items:
            return out

        now = self._clock()
        infos = []
        max_count = 0
        for d in items:
            entry = self._usage.get(d.usage_key)
            count = entry["count"] if entry else 0
            last = entry["lastActivatedAt"] if entry else 0
            max_count = max(max_count, count)
            infos.append((d.id, count, last))

        for item_id, count, last in infos:
            out[item_id] = {
                "count": count,
                "lastActivatedAt": last,
                "heat": heat_score(count, max_count, last, now),
            }
        return out

    def get(self, key: str) -> Optional[StoredUsage]:
        entry = self._usage.get(key)
        return dict(entry) if entry else None  # type: ignore[return-value]

    def records(self) -> Dict[str, StoredUsage]:
        """Copy of all retained records, most recent first."""
        ordered = sorted(self._usage.items(), key=lambda kv: -kv[1]["lastActivatedAt"])
        return {k: dict(v) for k, v in ordered}  # type: ignore[misc]

    def __len__(self) -> int:
        return len(self._usage)

    # Persistence ----------------------------------------------------------------------
    def _trim(self) -> None:
        """Keep only the `limit` most recently activated records."""
        if len(self._usage) <= self.limit:
            return
        ordered = sorted(self._usage.items(), key=lambda kv: kv[1]["lastActivatedAt"], reverse=True)
        self._usage = dict(ordered[: self.limit])

    def _persist(self) -> None:
        """Write the whole mapping. Failures are logged, not retried."""
        if self._store is None:
            return
        payload = {k: dict(v) for k, v in self._usage.items()}
        try:
            self._store.set(STORAGE_KEY, payload)
        except Exception as e:
            Log.error(f"[Usage] save failed: {e}")

    def _load(self) -> None:
        """Restore records from the store, skipping malformed ones."""
        if self._store is None:
            return
        try:
            stored = self._store.get(STORAGE_KEY)
        except Exception as e:
            Log.error(f"[Usage] load failed: {e}")
            return
        if not isinstance(stored, dict):
            return

        skipped = 0
        for key, value in stored.items():
            if (
                isinstance(value, dict)
                and _is_number(value.get("count"))
                and value["count"] >= 0
                and _is_number(value.get("lastActivatedAt"))
            ):
                self._usage[str(key)] = {
                    "count": int(value["count"]),
                    "lastActivatedAt": int(value["lastActivatedAt"]),
                }
            else:
                skipped += 1

        self._trim()
        if skipped:
            Log.warning(f"[Usage] skipped {skipped} malformed usage records")
        if self.verbose:
            Log.write(f"[Usage] loaded {len(self._usage)} usage records")
