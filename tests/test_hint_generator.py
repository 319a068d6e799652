# tests/test_hint_generator.py
import pytest

from tab_easymotion.core.errors import AlphabetExhausted
from tab_easymotion.core.hint_generator import capacity, generate_hints, normalize_alphabet


def test_breadth_first_order_small():
    assert generate_hints(3, "ab") == ["a", "b", "aa"]


def test_breadth_first_order_groups_by_parent():
    assert generate_hints(5, "ab") == ["a", "b", "aa", "ab", "ba"]


def test_count_within_alphabet_gives_single_letters():
    out = generate_hints(4, "asdfg")
    assert out == ["a", "s", "d", "f"]
    assert all(len(code) == 1 for code in out)


def test_parent_and_child_share_a_batch():
    # "a" is emitted and also extended to "aa"
    out = generate_hints(3, "ab")
    assert "a" in out and "aa" in out


@pytest.mark.parametrize("count,alphabet,depth", [
    (1, "a", None),
    (30, "ab", None),
    (40, "abc", 4),
    (100, "asdfghjkl;", 2),
    (7, "xyz", None),
])
def test_distinct_and_non_decreasing_lengths(count, alphabet, depth):
    out = generate_hints(count, alphabet, depth)
    assert len(out) == count
    assert len(set(out)) == count
    lengths = [len(c) for c in out]
    assert lengths == sorted(lengths)
    assert all(set(c) <= set(alphabet) for c in out)


def test_depth_cap_exhausted():
    with pytest.raises(AlphabetExhausted) as exc:
        generate_hints(4, "abc", max_depth=1)
    assert exc.value.reason == AlphabetExhausted.CAPACITY


def test_depth_cap_exact_capacity_is_fine():
    out = generate_hints(6, "ab", max_depth=2)
    assert out == ["a", "b", "aa", "ab", "ba", "bb"]


def test_empty_alphabet_fails():
    with pytest.raises(AlphabetExhausted) as exc:
        generate_hints(1, "")
    assert exc.value.reason == AlphabetExhausted.EMPTY


def test_alphabet_deduplicated_and_lowercased():
    assert normalize_alphabet("aAbBa") == "ab"
    assert generate_hints(3, "aab") == ["a", "b", "aa"]


def test_zero_count_returns_nothing():
    assert generate_hints(0, "ab") == []


def test_capacity():
    assert capacity("ab", 2) == 6
    assert capacity("abc", 1) == 3
    assert capacity("ab", None) is None


@pytest.mark.parametrize("depth", [0, -1, None])
def test_non_positive_depth_means_unbounded(depth):
    assert generate_hints(7, "ab", max_depth=depth) == ["a", "b", "aa", "ab", "ba", "bb", "aaa"]
    assert capacity("ab", depth) is None
