"""
tab_easymotion.core

The hint engine:
 - breadth-first hint codes (generate_hints)
 - code <-> tab pairing for one session (TabHintRegistry)
 - activation history and heat (UsageTracker)
 - prefix matching of typed keys (MatchEngine)
"""

from .errors import AlphabetExhausted, NoMatch, TabEasyMotionError, UnresolvedSelection, UnsupportedItemKind
from .hint_generator import generate_hints
from .hint_registry import HintEntry, TabHintRegistry
from .match_engine import MatchEngine, MatchPhase, MatchState, compute_match_state
from .usage_tracker import UsageTracker

__all__ = [
    "AlphabetExhausted",
    "NoMatch",
    "TabEasyMotionError",
    "UnresolvedSelection",
    "UnsupportedItemKind",
    "generate_hints",
    "HintEntry",
    "TabHintRegistry",
    "MatchEngine",
    "MatchPhase",
    "MatchState",
    "compute_match_state",
    "UsageTracker",
]
