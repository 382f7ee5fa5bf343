"""Shared fixtures for multiverse tests."""

import numpy as np
import pytest

from multiverse.core.board import Board
from multiverse.core.rulesets import RulesetCatalog


def symmetrize(cells: np.ndarray) -> np.ndarray:
    """Make a square array invariant under all 8 symmetries of the square."""
    cells = cells | cells.T
    cells = cells | np.fliplr(cells)
    return cells | np.flipud(cells)


@pytest.fixture(scope="session")
def catalog():
    """A single ruleset catalog shared by the whole test run."""
    return RulesetCatalog()


@pytest.fixture
def symmetric_boards():
    """A reproducible mix of sparse and dense symmetric boards, sizes 1 to 15."""
    rng = np.random.default_rng(1234)
    boards = []
    for size in range(1, 17, 2):
        for density in (0.1, 0.3, 0.6):
            cells = (rng.random((size, size)) < density).astype(np.int8)
            boards.append(Board(size, symmetrize(cells)))
    return boards
