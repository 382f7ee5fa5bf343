"""Single-generation evolution of symmetric boards under a ruleset.

Every function here is pure: boards passed in are never modified. The
"no board" sentinel produced once trimming removes all spatial extent is
represented by ``None``.
"""

from typing import List, Optional, Sequence
import numpy as np
import torch

from .board import Board
from .rulesets import Ruleset


def pad(board: Board) -> Board:
    """Surround a board with a ring of dead cells (N -> N+2)."""
    return Board(board.size + 2, np.pad(board.cells, 1, mode="constant", constant_values=0))


def _apply_rules(cells: np.ndarray, neighbor_counts: np.ndarray, ruleset: Ruleset) -> np.ndarray:
    """Apply a ruleset's thresholds to every cell at once."""
    result = cells.copy()

    life_mask = (neighbor_counts >= ruleset.birth_start) & (neighbor_counts <= ruleset.birth_end)
    death_mask = (neighbor_counts <= ruleset.underpop_end) | (neighbor_counts >= ruleset.overpop_start)

    result[life_mask] = 1
    result[death_mask] = 0
    return result


def step(board: Board, ruleset: Ruleset) -> Board:
    """Advance a board by one generation without changing its size.

    Neighbors outside the board count as dead.
    """
    neighbor_counts = board.count_all_neighbors()
    return Board(board.size, _apply_rules(board.cells, neighbor_counts, ruleset))


def step_all(board: Board, rulesets: Sequence[Ruleset]) -> List[Board]:
    """Advance a board by one generation under each of many rulesets.

    Neighbor counts do not depend on the ruleset, so they are computed once
    and every ruleset's thresholds are broadcast over a (rulesets, N, N)
    tensor.

    Returns:
        One board per ruleset, in the order given
    """
    if not rulesets:
        return []

    thresholds = torch.tensor([r.as_tuple() for r in rulesets], dtype=torch.int16)
    underpop_end, birth_start, birth_end, overpop_start = (
        thresholds[:, i].view(-1, 1, 1) for i in range(4)
    )

    counts = torch.from_numpy(board.count_all_neighbors().astype(np.int16)).unsqueeze(0)
    cells = torch.from_numpy(board.cells.astype(np.int16)).unsqueeze(0)

    life_mask = (counts >= birth_start) & (counts <= birth_end)
    death_mask = (counts <= underpop_end) | (counts >= overpop_start)

    new_cells = cells.expand(len(rulesets), board.size, board.size).clone()
    new_cells[life_mask] = 1
    new_cells[death_mask] = 0

    return [Board(board.size, layer) for layer in new_cells.numpy()]


def can_trim(board: Optional[Board]) -> bool:
    """Whether the outer ring of a board larger than 1x1 is entirely dead."""
    if board is None or board.size <= 1:
        return False
    return board.border_is_dead()


def trim(board: Board) -> Optional[Board]:
    """Remove the outer ring (N -> N-2).

    Returns:
        The trimmed board, or None if nothing would be left
    """
    if board.size <= 2:
        return None
    return Board(board.size - 2, board.cells[1:-1, 1:-1])


def trim_fully(board: Optional[Board]) -> Optional[Board]:
    """Trim dead outer rings until the border has a live cell.

    Returns:
        A board whose outer ring holds a live cell, or None for the all-dead
        board
    """
    while can_trim(board):
        board = trim(board)

    if board is None or board.population == 0:
        return None
    return board


def evolve(board: Board, ruleset: Ruleset) -> Optional[Board]:
    """Pad, step and fully trim: one expansion step for one ruleset."""
    return trim_fully(step(pad(board), ruleset))


def evolve_all(board: Board, rulesets: Sequence[Ruleset]) -> List[Optional[Board]]:
    """One expansion step for every ruleset, padding the board once."""
    return [trim_fully(evolved) for evolved in step_all(pad(board), rulesets)]
