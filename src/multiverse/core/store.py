"""Persistent graph of board expansions backed by SQLite."""

import logging
import sqlite3
from typing import Any, List, Optional, Sequence, Tuple

from .codec import BoardId, ZERO_BOARD, canonical_id, child_id_width
from .rulesets import RulesetCatalog

logger = logging.getLogger(__name__)


_SCHEMA = """
    CREATE TABLE IF NOT EXISTS boards (
        board_id BLOB PRIMARY KEY,
        expanded BOOLEAN DEFAULT 0,
        is_root BOOLEAN DEFAULT 0,
        parent_size INTEGER DEFAULT 0,
        parents BLOB,
        children BLOB
    )
"""


class StorageError(Exception):
    """Raised when the store cannot be opened, created or read."""


class GraphStore:
    """Durable map from canonical board identifiers to board nodes.

    Each row holds one board: whether it has been expanded, whether it is a
    root, its children (one fixed-width slot per ruleset id) and a bounded set
    of parents. Identifiers shorter than their slot are zero-padded and
    recovered with :func:`canonical_id`.

    Every mutation is committed on its own. Mutators report write failures by
    returning False; reads that fail raise :class:`StorageError`. Stored blobs
    whose length does not fit the expected layout are treated as absent.
    """

    def __init__(self, path: str, catalog: RulesetCatalog) -> None:
        """Open (creating if needed) the store at ``path``.

        Args:
            path: SQLite database file, or ":memory:"
            catalog: Ruleset catalog that indexes the children slots

        Raises:
            StorageError: If the database cannot be opened or the schema created
        """
        self.path = path
        self.catalog = catalog
        self.max_parents = catalog.count()

        try:
            self._conn = sqlite3.connect(path)
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {path}: {e}") from e

        logger.debug("Opened graph store at %s", path)

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def __enter__(self) -> "GraphStore":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # === Low-level helpers ===

    def _fetch_one(self, sql: str, params: Tuple[Any, ...] = ()) -> Optional[tuple]:
        try:
            return self._conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Read failed: {e}") from e

    def _fetch_all(self, sql: str, params: Tuple[Any, ...] = ()) -> List[tuple]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Read failed: {e}") from e

    def _write(self, sql: str, params: Tuple[Any, ...]) -> int:
        """Run one committed statement.

        Returns:
            Number of affected rows, or -1 if the write failed
        """
        try:
            with self._conn:
                cursor = self._conn.execute(sql, params)
        except sqlite3.Error as e:
            logger.error("Write failed: %s", e)
            return -1
        return cursor.rowcount

    def _children_fit(self, board_id: bytes, blob_length: Optional[int]) -> bool:
        """Whether a children blob of this length matches the board's layout."""
        return blob_length == child_id_width(board_id) * self.catalog.count()

    def _unpack_children(self, board_id: bytes, blob: Optional[bytes]) -> Optional[List[BoardId]]:
        width = child_id_width(board_id)
        expected = width * self.catalog.count()
        if blob is None or len(blob) != expected:
            logger.warning(
                "Ignoring children of %s: blob is %s bytes, expected %d",
                bytes(board_id).hex(),
                "missing" if blob is None else len(blob),
                expected,
            )
            return None
        return [canonical_id(blob[offset : offset + width]) for offset in range(0, expected, width)]

    def _unpack_parents(self, board_id: bytes, parent_size: int, blob: Optional[bytes]) -> List[BoardId]:
        if not parent_size or not blob:
            return []
        if len(blob) % parent_size != 0:
            logger.warning(
                "Ignoring parents of %s: blob of %d bytes is not a multiple of %d",
                bytes(board_id).hex(),
                len(blob),
                parent_size,
            )
            return []

        parents = []
        for offset in range(0, len(blob), parent_size):
            parent = canonical_id(blob[offset : offset + parent_size])
            if parent != ZERO_BOARD:
                parents.append(parent)
        return parents

    # === Nodes ===

    def insert(self, board_id: bytes, is_root: bool = False) -> bool:
        """Insert an unexpanded board with no parents; a no-op if it exists.

        Raises:
            ValueError: If board_id is not a valid identifier length
        """
        key = bytes(BoardId(board_id))
        rowcount = self._write(
            "INSERT OR IGNORE INTO boards (board_id, expanded, is_root, parent_size) VALUES (?, 0, ?, 0)",
            (key, 1 if is_root else 0),
        )
        return rowcount >= 0

    def exists(self, board_id: bytes) -> bool:
        """Check if a board is stored."""
        return self._fetch_one("SELECT 1 FROM boards WHERE board_id = ? LIMIT 1", (bytes(board_id),)) is not None

    def is_expanded(self, board_id: bytes) -> bool:
        """Whether a board's children have been computed.

        False if the board is absent, or if its stored children do not fit
        the expected layout; such a board is expanded again.
        """
        row = self._fetch_one(
            "SELECT expanded, LENGTH(children) FROM boards WHERE board_id = ?", (bytes(board_id),)
        )
        if row is None or not row[0]:
            return False
        if not self._children_fit(board_id, row[1]):
            logger.warning("Children of %s are unusable, treating it as unexpanded", bytes(board_id).hex())
            return False
        return True

    def is_root(self, board_id: bytes) -> bool:
        """Whether a board was inserted as a seed (False if absent)."""
        row = self._fetch_one("SELECT is_root FROM boards WHERE board_id = ?", (bytes(board_id),))
        return row is not None and bool(row[0])

    # === Children ===

    def get_evolution(self, board_id: bytes, ruleset_id: int) -> Optional[BoardId]:
        """Get the child produced by one ruleset.

        Returns:
            The child identifier, or None if the board is not expanded, the
            ruleset id is out of range or the stored children are unusable
        """
        if not 0 <= ruleset_id < self.catalog.count():
            return None

        row = self._fetch_one("SELECT expanded, children FROM boards WHERE board_id = ?", (bytes(board_id),))
        if row is None or not row[0]:
            return None

        width = child_id_width(board_id)
        blob = row[1]
        if blob is None or len(blob) != width * self.catalog.count():
            logger.warning("Ignoring children of %s: unexpected blob size", bytes(board_id).hex())
            return None

        offset = ruleset_id * width
        return canonical_id(blob[offset : offset + width])

    def get_all_evolutions(self, board_id: bytes) -> Optional[List[BoardId]]:
        """Get all children in ruleset id order, or None if not expanded."""
        row = self._fetch_one("SELECT expanded, children FROM boards WHERE board_id = ?", (bytes(board_id),))
        if row is None or not row[0]:
            return None
        return self._unpack_children(board_id, row[1])

    def set_evolutions(self, board_id: bytes, children: Sequence[bytes]) -> bool:
        """Store a board's children and mark it expanded.

        Args:
            board_id: Board being expanded
            children: Exactly one child identifier per ruleset, in id order

        Returns:
            True on success, False if the board is absent or the write failed

        Raises:
            ValueError: If the number of children is wrong or a child does not
                fit the child slot width
        """
        count = self.catalog.count()
        if len(children) != count:
            raise ValueError(f"Must provide exactly {count} evolutions, got {len(children)}")

        width = child_id_width(board_id)
        blob = bytearray()
        for child in children:
            if len(child) > width:
                raise ValueError(f"Child ID size mismatch: expected at most {width}, got {len(child)}")
            blob += bytes(child).ljust(width, b"\x00")

        rowcount = self._write(
            "UPDATE boards SET expanded = 1, children = ? WHERE board_id = ?",
            (bytes(blob), bytes(board_id)),
        )
        return rowcount == 1

    # === Parents ===

    def add_parent(self, child_id: bytes, parent_id: bytes) -> bool:
        """Record that ``parent_id`` evolves into ``child_id``.

        At most ``max_parents`` parents are kept per child, preferring the
        shortest identifiers (the smallest boards). Once full, a new parent
        replaces the current largest only if it is strictly shorter.

        Returns:
            False if the child is absent or the write failed; True otherwise,
            including when the parent was already recorded or not retained
        """
        row = self._fetch_one("SELECT parent_size, parents FROM boards WHERE board_id = ?", (bytes(child_id),))
        if row is None:
            return False

        parent = BoardId(parent_id)
        parents = self._unpack_parents(child_id, row[0], row[1])
        if parent in parents:
            return True

        # Largest first
        parents.sort(key=len, reverse=True)
        if len(parents) >= self.max_parents:
            if len(parent) >= len(parents[0]):
                return True
            del parents[: len(parents) - self.max_parents + 1]

        parents.append(parent)
        parents.sort(key=len, reverse=True)

        parent_size = len(parents[0])
        blob = b"".join(bytes(p).ljust(parent_size, b"\x00") for p in parents)

        rowcount = self._write(
            "UPDATE boards SET parent_size = ?, parents = ? WHERE board_id = ?",
            (parent_size, blob, bytes(child_id)),
        )
        return rowcount == 1

    def get_parents(self, board_id: bytes) -> List[BoardId]:
        """Get the recorded parents of a board, largest first."""
        row = self._fetch_one("SELECT parent_size, parents FROM boards WHERE board_id = ?", (bytes(board_id),))
        if row is None:
            return []
        return self._unpack_parents(board_id, row[0], row[1])

    def parent_count(self, board_id: bytes) -> int:
        """Number of recorded parents of a board."""
        return len(self.get_parents(board_id))

    # === Statistics ===

    def total_boards(self) -> int:
        """Number of stored boards."""
        return self._fetch_one("SELECT COUNT(*) FROM boards")[0]

    def unexpanded_count(self) -> int:
        """Number of stored boards not yet expanded."""
        return len(self.get_unexpanded_boards())

    def get_unexpanded_boards(self) -> List[BoardId]:
        """All unexpanded boards, in insertion order.

        Boards marked expanded whose children blob does not fit the layout
        are included, so an interrupted or corrupted write gets redone.
        """
        rows = self._fetch_all("SELECT board_id, expanded, LENGTH(children) FROM boards ORDER BY rowid")
        unexpanded = []
        for board_id, expanded, blob_length in rows:
            if not expanded:
                unexpanded.append(BoardId(board_id))
            elif not self._children_fit(board_id, blob_length):
                logger.warning("Children of %s are unusable, treating it as unexpanded", bytes(board_id).hex())
                unexpanded.append(BoardId(board_id))
        return unexpanded
