# tests/test_hint_registry.py
import pytest

from tab_easymotion.core.errors import AlphabetExhausted
from tab_easymotion.core.hint_registry import HintEntry, TabHintRegistry
from tab_easymotion.core.tab_collector import collect_active_group_tabs


@pytest.fixture
def registry():
    return TabHintRegistry()


def test_rebuild_pairs_codes_in_tab_order(registry, workbench):
    tabs = collect_active_group_tabs(workbench)
    registry.rebuild(tabs, "ab")
    entries = registry.get_view_entries()

    assert [e.hint for e in entries] == ["a", "b", "aa", "ab", "ba"]
    assert [e.title for e in entries] == [t.title for t in tabs]
    assert entries[0].id == "1:0"
    assert entries[0].first_letter == "R"
    # usage is filled in by the controller, not the registry
    assert all(e.usage_count == 0 and e.usage_heat == 0 and e.last_activated_at == 0 for e in entries)


def test_resolve_is_case_insensitive(registry, workbench):
    tabs = collect_active_group_tabs(workbench)
    registry.rebuild(tabs, "ab")
    assert registry.resolve_by_code("AB") is tabs[3]
    assert registry.resolve_by_code("a") is tabs[0]
    assert registry.resolve_by_code("bb") is None


def test_code_for_reverse_lookup(registry, workbench):
    tabs = collect_active_group_tabs(workbench)
    registry.rebuild(tabs, "ab")
    assert registry.code_for(tabs[2].id) == "aa"
    assert registry.code_for("9:9") is None


def test_empty_tabs_empties_state(registry, workbench):
    registry.rebuild(collect_active_group_tabs(workbench), "ab")
    registry.rebuild([], "")
    assert len(registry) == 0
    assert registry.get_view_entries() == []


def test_failed_rebuild_leaves_no_stale_pairs(registry, workbench):
    tabs = collect_active_group_tabs(workbench)
    registry.rebuild(tabs, "ab")
    with pytest.raises(AlphabetExhausted):
        registry.rebuild(tabs, "ab", max_depth=1)
    assert len(registry) == 0
    assert registry.resolve_by_code("a") is None


def test_clear(registry, workbench):
    registry.rebuild(collect_active_group_tabs(workbench), "asdf")
    registry.clear()
    assert registry.resolve_by_code("a") is None


def test_entry_wire_names():
    entry = HintEntry("1:0", "a", "x.py", "/x.py", 0, "x").with_usage(3, 0.5, 42)
    d = entry.to_dict()
    assert d["firstLetter"] == "x"
    assert d["usageCount"] == 3
    assert d["usageHeat"] == 0.5
    assert d["lastActivatedAt"] == 42
    assert HintEntry.from_dict(d) == entry
