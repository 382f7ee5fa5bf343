"""Canonical identifiers for 8-fold symmetric boards.

A symmetric board is fully described by its fundamental domain: the
triangular wedge of cells running from the center out to one corner. For a
board of size 2k+1 that wedge holds (k+1)(k+2)/2 cells. The domain is walked
from the center row outward (row c-d for d = 0..k), each row from the
diagonal column c-d to the center column c, and the bits are packed
most-significant-bit first.

Because every row of the walk is relative to the center, the walk for a size
is a prefix of the walk for every larger size. An identifier followed by zero
bytes therefore still describes the same board, surrounded by dead rings.
This is what lets the store keep identifiers of different lengths in
fixed-width, zero-padded slots.
"""

from functools import lru_cache
from typing import Optional, Tuple
import numpy as np

from .board import Board


def domain_bits(size: int) -> int:
    """Number of cells in the fundamental domain of a board of the given size."""
    k = size // 2
    return (k + 1) * (k + 2) // 2


def byte_length_from_size(size: int) -> int:
    """Identifier length in bytes for a board of the given odd size.

    At least one byte per ring (k + 1) keeps the length strictly increasing
    with size, so a length maps back to exactly one size. From k = 14 on the
    domain itself needs more than that and the length is just ceil(bits / 8).

    Raises:
        ValueError: If size is not odd and positive
    """
    if size <= 0 or size % 2 == 0:
        raise ValueError(f"Board size must be odd and positive, got {size}")
    k = size // 2
    return max(k + 1, (domain_bits(size) + 7) // 8)


def size_from_byte_length(length: int) -> int:
    """Board size implied by an identifier length.

    Raises:
        ValueError: If no board size produces identifiers of this length
    """
    if length <= 0:
        raise ValueError(f"Invalid identifier length {length}")

    k = 0
    while byte_length_from_size(2 * k + 1) < length:
        k += 1
    if byte_length_from_size(2 * k + 1) != length:
        raise ValueError(f"Invalid identifier length {length}")
    return 2 * k + 1


def is_valid_length(length: int) -> bool:
    """Whether some board size produces identifiers of this length."""
    try:
        size_from_byte_length(length)
    except ValueError:
        return False
    return True


class BoardId(bytes):
    """Canonical identifier of a symmetric board.

    Equality and hashing are plain ``bytes`` semantics; ordering is by length
    first (which is board size) and then by content.
    """

    __slots__ = ()

    def __new__(cls, data: bytes = b"\x00") -> "BoardId":
        if not is_valid_length(len(data)):
            raise ValueError(f"Invalid identifier length {len(data)}")
        return super().__new__(cls, data)

    @property
    def size(self) -> int:
        """Side length of the board this identifier decodes to."""
        return size_from_byte_length(len(self))

    def _key(self) -> Tuple[int, bytes]:
        return (len(self), bytes(self))

    def __lt__(self, other: bytes) -> bool:
        return self._key() < (len(other), bytes(other))

    def __le__(self, other: bytes) -> bool:
        return self._key() <= (len(other), bytes(other))

    def __gt__(self, other: bytes) -> bool:
        return self._key() > (len(other), bytes(other))

    def __ge__(self, other: bytes) -> bool:
        return self._key() >= (len(other), bytes(other))

    __eq__ = bytes.__eq__
    __hash__ = bytes.__hash__

    def __repr__(self) -> str:
        return f"BoardId({self.hex()})"


ZERO_BOARD = BoardId(b"\x00")


def child_id_width(board_id: bytes) -> int:
    """Byte width of a child slot: the identifier length of a board one ring larger."""
    return byte_length_from_size(size_from_byte_length(len(board_id)) + 2)


def parent_id_width(board_id: bytes) -> int:
    """Identifier length of a board one ring smaller (0 for a 1x1 board)."""
    size = size_from_byte_length(len(board_id))
    if size == 1:
        return 0
    return byte_length_from_size(size - 2)


@lru_cache(maxsize=None)
def _domain_indices(size: int) -> Tuple[np.ndarray, np.ndarray]:
    """Row and column indices of the fundamental domain in walk order."""
    center = size // 2
    rows = []
    cols = []
    for d in range(center + 1):
        row = center - d
        for col in range(row, center + 1):
            rows.append(row)
            cols.append(col)
    return np.array(rows, dtype=np.intp), np.array(cols, dtype=np.intp)


def encode(board: Optional[Board]) -> BoardId:
    """Convert a symmetric board to its identifier.

    Only the fundamental domain is read; asymmetric information elsewhere on
    the board is silently discarded. ``None`` is the zero board.
    """
    if board is None:
        return ZERO_BOARD

    rows, cols = _domain_indices(board.size)
    bits = board.cells[rows, cols] > 0
    packed = np.packbits(bits, bitorder="big").tobytes()
    return BoardId(packed.ljust(byte_length_from_size(board.size), b"\x00"))


def decode(board_id: bytes, size: int) -> Board:
    """Expand an identifier back into a full board of the given size.

    Raises:
        ValueError: If size does not match the identifier length
    """
    expected = byte_length_from_size(size)
    if len(board_id) != expected:
        raise ValueError(
            f"Identifier of {len(board_id)} bytes doesn't describe a board of size {size} "
            f"(expected {expected} bytes)"
        )

    rows, cols = _domain_indices(size)
    bits = np.unpackbits(np.frombuffer(bytes(board_id), dtype=np.uint8), bitorder="big")[: len(rows)]

    cells = np.zeros((size, size), dtype=np.int8)
    cells[rows, cols] = bits
    # Domain -> upper-left quadrant -> upper half -> whole board
    cells = cells | cells.T
    cells = cells | np.fliplr(cells)
    cells = cells | np.flipud(cells)
    return Board(size, cells)


def canonical_id(raw: bytes) -> BoardId:
    """Recover a canonical identifier from a zero-padded slot.

    The highest set bit of the walk lies in the outermost live ring, which
    fixes the board size; everything after that size's identifier length is
    padding.
    """
    bits = np.unpackbits(np.frombuffer(bytes(raw), dtype=np.uint8), bitorder="big")
    live = np.flatnonzero(bits)
    if len(live) == 0:
        return ZERO_BOARD

    highest = int(live[-1])
    k = 0
    while (k + 1) * (k + 2) // 2 <= highest:
        k += 1
    length = byte_length_from_size(2 * k + 1)
    return BoardId(bytes(raw[:length]).ljust(length, b"\x00"))
