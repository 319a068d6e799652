# hint_generator.py
# Breadth-first hint code generator.
# Codes come out shortest first, grouped by the shorter code they extend:
#   alphabet "ab" -> a, b, aa, ab, ba, bb, aaa, ...
# A code and its own extensions can share one batch ("a" and "aa"). The match
# engine tells them apart (exact match needs Enter, a sole match fires at once).

from __future__ import annotations
from collections import deque
from typing import Deque, List, Optional, Tuple
import logging

from tab_easymotion.core.errors import AlphabetExhausted

logger = logging.getLogger(__name__)

HintCode = str


def normalize_alphabet(alphabet: str) -> str:
    """Lower-case and de-duplicate, keeping first-seen order."""
    seen = []
    for ch in (alphabet or "").lower():
        if ch not in seen:
            seen.append(ch)
    return "".join(seen)


def generate_hints(count: int, alphabet: str, max_depth: Optional[int] = None) -> List[HintCode]:
    """
    Return `count` distinct codes built from `alphabet`.

    max_depth caps code length; None, 0 or a negative value means unbounded.
    Raises AlphabetExhausted when the alphabet is empty or the cap leaves too few codes.
    """
    letters = normalize_alphabet(alphabet)
    if not letters:
        raise AlphabetExhausted("The hint alphabet must not be empty.", AlphabetExhausted.EMPTY)

    results: List[HintCode] = []
    if count <= 0:
        return results

    queue: Deque[Tuple[HintCode, int]] = deque((ch, 1) for ch in letters)

    while len(results) < count:
        if not queue:
            raise AlphabetExhausted(
                f"The hint alphabet ({len(letters)} keys, max length {max_depth}) "
                f"cannot produce {count} hints.",
                AlphabetExhausted.CAPACITY,
            )
        code, depth = queue.popleft()
        results.append(code)

        if max_depth is not None and 0 < max_depth <= depth:
            continue
        for ch in letters:
            queue.append((code + ch, depth + 1))

    logger.debug("generated %d hints from %r (max_depth=%s)", len(results), letters, max_depth)
    return results


def capacity(alphabet: str, max_depth: Optional[int]) -> Optional[int]:
    """How many codes the alphabet can produce under the cap (None = unbounded)."""
    k = len(normalize_alphabet(alphabet))
    if max_depth is None or max_depth <= 0:
        return None if k else 0
    return sum(k ** d for d in range(1, max_depth + 1))
