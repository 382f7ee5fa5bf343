"""Expansion of the reachability graph, one board at a time."""

import logging
from typing import Optional

from .board import Board
from .codec import BoardId, ZERO_BOARD, decode, encode
from .evolution import evolve_all, trim_fully
from .metrics import ExpansionMetrics
from .rulesets import RulesetCatalog
from .store import GraphStore

logger = logging.getLogger(__name__)


class ExpansionDriver:
    """Drives expansion of a graph store.

    Expanding a board evolves it under every ruleset of the catalog, registers
    each new child in the store together with a parent back-link, and finally
    stores the full list of children. A board moves from unexpanded to
    expanded exactly once; a failed store write leaves it unexpanded so the
    next pass retries it.
    """

    def __init__(self, store: GraphStore, catalog: RulesetCatalog) -> None:
        """Initialize the driver.

        Args:
            store: Graph store to expand
            catalog: Rulesets to evolve every board under
        """
        self.store = store
        self.catalog = catalog
        self.metrics = ExpansionMetrics()

    def seed(self, board: Optional[Board] = None) -> BoardId:
        """Insert a root board, by default the 1x1 single live cell.

        The board is trimmed before encoding so the stored key is canonical.

        Returns:
            Identifier of the root board
        """
        if board is None:
            board = Board.seed()

        root_id = encode(trim_fully(board))
        if not self.store.insert(root_id, is_root=True):
            logger.error("Failed to insert root board %s", root_id.hex())
        return root_id

    def expand_node(self, board_id: bytes) -> bool:
        """Compute and store the children of one board.

        Returns:
            True if the board was expanded; False if it is absent, already
            expanded, or a store write failed
        """
        try:
            board_id = BoardId(board_id)
        except ValueError:
            # No board has an identifier of this length, so it cannot be stored
            logger.warning("Board %s does not exist", bytes(board_id).hex())
            return False

        if not self.store.exists(board_id):
            logger.warning("Board %s does not exist", board_id.hex())
            return False

        if self.store.is_expanded(board_id):
            return False

        board = decode(board_id, board_id.size)
        children = [encode(child) for child in evolve_all(board, self.catalog.enumerate())]
        self.metrics.children_computed += len(children)

        registered = set()
        for child_id in children:
            if child_id == ZERO_BOARD or child_id in registered:
                continue
            registered.add(child_id)

            if not self.store.exists(child_id):
                if not self.store.insert(child_id, is_root=False):
                    return self._fail(board_id, f"could not insert child {child_id.hex()}")
                self.metrics.boards_discovered += 1

            if not self.store.add_parent(child_id, board_id):
                return self._fail(board_id, f"could not link child {child_id.hex()}")

        if not self.store.set_evolutions(board_id, children):
            return self._fail(board_id, "could not store children")

        self.metrics.nodes_expanded += 1
        logger.debug(
            "Expanded %s (size %d): %d distinct non-empty children", board_id.hex(), board_id.size, len(registered)
        )
        return True

    def _fail(self, board_id: BoardId, reason: str) -> bool:
        self.metrics.nodes_failed += 1
        logger.error("Expansion of %s failed: %s", board_id.hex(), reason)
        return False

    def expand_all_nodes(self, limit: Optional[int] = None) -> int:
        """Expand boards until none are left unexpanded.

        Expanding a batch inserts new unexpanded children, so unexpanded boards
        are refetched after every pass. Several rulesets grow without bound,
        which makes the full graph infinite from most seeds; ``limit`` caps the
        number of expansions in this call.

        Args:
            limit: Maximum number of boards to expand (None for no limit)

        Returns:
            Number of boards expanded
        """
        expanded = 0
        self.metrics.start()

        while limit is None or expanded < limit:
            unexpanded = self.store.get_unexpanded_boards()
            if not unexpanded:
                break

            self.metrics.passes += 1
            logger.info("Pass %d: %d unexpanded boards", self.metrics.passes, len(unexpanded))

            expanded_this_pass = 0
            for board_id in unexpanded:
                if limit is not None and expanded >= limit:
                    break
                if self.expand_node(board_id):
                    expanded += 1
                    expanded_this_pass += 1

            if expanded_this_pass == 0:
                logger.warning("No board could be expanded in pass %d, stopping", self.metrics.passes)
                break

        self.metrics.finish(self.store.total_boards(), self.store.unexpanded_count())
        logger.info("Expanded %d boards in %.2fs", expanded, self.metrics.duration)
        return expanded
