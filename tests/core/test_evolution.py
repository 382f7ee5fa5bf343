"""Tests for the evolution engine."""

import numpy as np
from multiverse.core.board import Board
from multiverse.core.codec import ZERO_BOARD, decode, encode
from multiverse.core.evolution import (
    can_trim,
    evolve,
    evolve_all,
    pad,
    step,
    step_all,
    trim,
    trim_fully,
)
from multiverse.core.rulesets import CONWAY, Ruleset

GROWTH = Ruleset(0, 1, 8, 9)

RING = [[1, 1, 1], [1, 0, 1], [1, 1, 1]]


def reference_step(board: Board, ruleset: Ruleset) -> Board:
    """Cell-by-cell evolution used to check the vectorized engine."""
    size = board.size
    result = Board(size)
    for row in range(size):
        for col in range(size):
            neighbors = 0
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    if dr == 0 and dc == 0:
                        continue
                    r, c = row + dr, col + dc
                    if 0 <= r < size and 0 <= c < size:
                        neighbors += int(board.get_cell(r, c))
            result.set_cell(row, col, ruleset.next_state(board.get_cell(row, col), neighbors))
    return result


class TestPad:
    """Test cases for padding."""

    def test_pad_seed(self):
        """Test padding adds a dead ring."""
        padded = pad(Board.seed())
        assert padded.size == 3
        assert padded.population == 1
        assert padded.get_cell(1, 1)
        assert padded.border_is_dead()

    def test_pad_does_not_modify_input(self):
        """Test padding is pure."""
        board = Board.from_list(RING)
        pad(board)
        assert board.size == 3
        assert board == Board.from_list(RING)


class TestStep:
    """Test cases for single-generation steps."""

    def test_conway_isolated_cell_dies(self):
        """Test a cell with no neighbors dies under the classic rule."""
        result = step(pad(Board.seed()), CONWAY)
        assert result.size == 3
        assert result.population == 0

    def test_growth_rule(self):
        """Test birth on one neighbor and death of the lonely center."""
        result = step(pad(Board.seed()), GROWTH)
        assert result == Board.from_list(RING)

    def test_matches_reference(self, symmetric_boards, catalog):
        """Test the vectorized step against a cell-by-cell implementation."""
        rulesets = [catalog.from_id(i) for i in range(0, catalog.count(), 37)] + [CONWAY, GROWTH]
        for board in symmetric_boards[:12]:
            for ruleset in rulesets:
                assert step(board, ruleset) == reference_step(board, ruleset)

    def test_step_is_pure(self):
        """Test the input board is not modified."""
        board = pad(Board.from_list(RING))
        before = board.copy()
        step(board, GROWTH)
        assert board == before

    def test_preserves_symmetry(self, symmetric_boards, catalog):
        """Test symmetric boards stay symmetric and survive an encode/decode round trip."""
        for board in symmetric_boards:
            for ruleset_id in range(0, catalog.count(), 29):
                result = step(board, catalog.from_id(ruleset_id))
                assert result.is_symmetric()
                assert decode(encode(result), result.size) == result

    def test_step_all_matches_step(self, symmetric_boards, catalog):
        """Test the batch step agrees with individual steps for every ruleset."""
        rulesets = catalog.enumerate()
        for board in symmetric_boards[3:9]:
            batch = step_all(board, rulesets)
            assert len(batch) == len(rulesets)
            for ruleset, result in zip(rulesets, batch):
                assert result == step(board, ruleset)

    def test_step_all_empty(self):
        """Test the batch step with no rulesets."""
        assert step_all(Board.seed(), []) == []


class TestTrim:
    """Test cases for trimming."""

    def test_can_trim(self):
        """Test trimming is allowed only for dead borders on boards above 1x1."""
        assert not can_trim(Board.seed())
        assert not can_trim(Board(1))
        assert not can_trim(None)
        assert can_trim(Board(3))
        assert can_trim(pad(Board.seed()))
        assert not can_trim(Board.from_list(RING))

    def test_trim(self):
        """Test removing the outer ring."""
        trimmed = trim(pad(Board.seed()))
        assert trimmed == Board.seed()
        assert trim(Board.seed()) is None

    def test_trim_fully(self):
        """Test trimming repeatedly down to the live extent."""
        board = pad(pad(pad(Board.from_list(RING))))
        assert board.size == 9
        assert trim_fully(board) == Board.from_list(RING)

    def test_trim_fully_dead_board(self):
        """Test an all-dead board trims to the sentinel."""
        assert trim_fully(Board(7)) is None
        assert trim_fully(Board(1)) is None
        assert trim_fully(None) is None

    def test_trim_fully_keeps_live_border(self):
        """Test a board with a live border is returned unchanged."""
        ring = Board.from_list(RING)
        assert trim_fully(ring) == ring

    def test_trim_fully_idempotent(self, symmetric_boards):
        """Test trim_fully(trim_fully(b)) == trim_fully(b)."""
        for board in symmetric_boards:
            once = trim_fully(pad(pad(board)))
            assert trim_fully(once) == once

    def test_trim_fully_result(self, symmetric_boards):
        """Test results are odd-sized with a live border, or the sentinel."""
        for board in symmetric_boards:
            result = trim_fully(board)
            if board.population == 0:
                assert result is None
            else:
                assert result.size % 2 == 1
                assert result.size == 1 or not result.border_is_dead()
                assert result.population == board.population


class TestEvolve:
    """Test cases for the full expansion step."""

    def test_conway_seed_is_zero_board(self):
        """Test the seed under the classic rule becomes the zero board."""
        assert evolve(Board.seed(), CONWAY) is None
        assert encode(evolve(Board.seed(), CONWAY)) == ZERO_BOARD
        assert encode(evolve(Board.seed(), CONWAY)) == bytes([0x00])

    def test_growth_seed(self):
        """Test the seed grows into a ring."""
        assert evolve(Board.seed(), GROWTH) == Board.from_list(RING)

    def test_evolve_all_matches_evolve(self, catalog):
        """Test the batch expansion agrees with single expansions."""
        board = Board.from_list(RING)
        results = evolve_all(board, catalog.enumerate())
        assert len(results) == catalog.count()
        for ruleset, result in zip(catalog, results):
            expected = evolve(board, ruleset)
            if expected is None:
                assert result is None
            else:
                assert result == expected

    def test_seed_children(self, catalog):
        """Test the seed has exactly two distinct children."""
        children = [encode(child) for child in evolve_all(Board.seed(), catalog.enumerate())]
        assert set(children) == {ZERO_BOARD, encode(Board.from_list(RING))}
        # Birth on one neighbor needs u = 0 and b0 = 1
        assert children.count(ZERO_BOARD) == 330 - 36

    def test_children_never_outgrow_padding(self, symmetric_boards, catalog):
        """Test children are at most one ring larger than their parent."""
        for board in symmetric_boards[:9]:
            for child in evolve_all(board, catalog.enumerate()):
                assert child is None or child.size <= board.size + 2
                assert child is None or np.array_equal(child.cells, child.cells.T)
