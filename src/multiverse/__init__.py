"""Multiverse exploration of symmetric cellular automata."""

__version__ = "0.1.0"

from .core.board import Board
from .core.codec import BoardId, ZERO_BOARD, encode, decode
from .core.rulesets import Ruleset, RulesetCatalog
from .core.store import GraphStore
from .core.expansion import ExpansionDriver

__all__ = [
    "Board",
    "BoardId",
    "ZERO_BOARD",
    "encode",
    "decode",
    "Ruleset",
    "RulesetCatalog",
    "GraphStore",
    "ExpansionDriver",
]
