"""Core multiverse exploration logic."""

from .board import Board
from .codec import BoardId, ZERO_BOARD
from .rulesets import Ruleset, RulesetCatalog, InvalidRuleset, InvalidRulesetId
from .store import GraphStore, StorageError
from .expansion import ExpansionDriver
from .metrics import ExpansionMetrics
from .runner import ExplorerConfig, run_exploration

__all__ = [
    "Board",
    "BoardId",
    "ZERO_BOARD",
    "Ruleset",
    "RulesetCatalog",
    "InvalidRuleset",
    "InvalidRulesetId",
    "GraphStore",
    "StorageError",
    "ExpansionDriver",
    "ExpansionMetrics",
    "ExplorerConfig",
    "run_exploration",
]
