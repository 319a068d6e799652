"""
hint_registry.py
Pairs generated hint codes with the tabs of one session.

The i-th code goes to the i-th tab in the order the host reported them.
The registry holds no usage state: entries come out with zeroed usage fields
and the controller fills them from the UsageTracker snapshot.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from tab_easymotion.core.hint_generator import generate_hints
from tab_easymotion.core.tab_collector import TabDescriptor

logger = logging.getLogger(__name__)

# wire names used by the presentation side
_WIRE_NAMES = {
    "first_letter": "firstLetter",
    "usage_count": "usageCount",
    "usage_heat": "usageHeat",
    "last_activated_at": "lastActivatedAt",
}


@dataclass(frozen=True)
class HintEntry:
    """One visible hint: code + tab metadata + usage fields."""

    id: str
    hint: str
    title: str
    description: str
    index: int
    first_letter: str = ""
    usage_count: int = 0
    usage_heat: float = 0.0
    last_activated_at: int = 0

    def with_usage(self, count: int, heat: float, last_activated_at: int) -> "HintEntry":
        return replace(self, usage_count=count, usage_heat=heat, last_activated_at=last_activated_at)

    def to_dict(self) -> Dict[str, Any]:
        return {_WIRE_NAMES.get(k, k): v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "HintEntry":
        return cls(
            id=str(d.get("id", "")),
            hint=str(d.get("hint", "")),
            title=str(d.get("title", "")),
            description=str(d.get("description", "")),
            index=int(d.get("index", 0)),
            first_letter=str(d.get("firstLetter", "")),
            usage_count=int(d.get("usageCount", 0) or 0),
            usage_heat=float(d.get("usageHeat", 0.0) or 0.0),
            last_activated_at=int(d.get("lastActivatedAt", 0) or 0),
        )


class TabHintRegistry:
    """
    Session-scoped mapping between hint codes and tab descriptors.
    Public API:
      rebuild(tabs, alphabet, max_depth)
      get_view_entries()
      resolve_by_code(code)
      clear()
    """

    def __init__(self) -> None:
        self._hints: List[Tuple[str, TabDescriptor]] = []

    def rebuild(self, tabs: Sequence[TabDescriptor], alphabet: str, max_depth: Optional[int] = None) -> None:
        """
        Replace all pairings. An empty tab list just empties the registry.
        AlphabetExhausted propagates to the caller; prior pairings are gone either way.
        """
        self._hints = []
        if not tabs:
            return

        codes = generate_hints(len(tabs), alphabet, max_depth)
        self._hints = list(zip(codes, tabs))
        logger.debug("registry rebuilt with %d hints", len(self._hints))

    def clear(self) -> None:
        self._hints = []

    def get_view_entries(self) -> List[HintEntry]:
        return [
            HintEntry(
                id=d.id,
                hint=code,
                title=d.title,
                description=d.description,
                index=d.index,
                first_letter=d.title[:1],
            )
            for code, d in self._hints
        ]

    def resolve_by_code(self, code: str) -> Optional[TabDescriptor]:
        """Case-insensitive exact lookup."""
        wanted = (code or "").lower()
        for hint, descriptor in self._hints:
            if hint.lower() == wanted:
                return descriptor
        return None

    def code_for(self, item_id: str) -> Optional[str]:
        """Reverse lookup: descriptor id -> code."""
        for hint, descriptor in self._hints:
            if descriptor.id == item_id:
                return hint
        return None

    def __len__(self) -> int:
        return len(self._hints)
