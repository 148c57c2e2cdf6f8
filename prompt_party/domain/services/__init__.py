"""Domain services for the party game."""

from .content_selector import CadencePolicy, ContentSelector, Selection
from .game_controller import GameController
from .session_state_machine import SessionStateMachine
from .unlock_evaluator import UnlockEvaluator
from .usage_tracker import UsageTracker

__all__ = [
    "CadencePolicy",
    "ContentSelector",
    "GameController",
    "Selection",
    "SessionStateMachine",
    "UnlockEvaluator",
    "UsageTracker",
]
