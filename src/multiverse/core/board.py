"""Square board data structure for symmetric cellular automata."""

from typing import List, Optional
import numpy as np
import torch
import torch.nn.functional as F


_NEIGHBOR_KERNEL = (
    torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
)


class Board:
    """Represents a square, odd-sized board of binary cells.

    Cells are stored in a numpy array indexed as ``[row, col]``. Edges never
    wrap: cells outside the board count as dead. Boards explored by the
    multiverse are 8-fold symmetric, but the class itself does not enforce it
    so that intermediate states can be inspected.
    """

    def __init__(self, size: int, cells: Optional[np.ndarray] = None) -> None:
        """Initialize a new board.

        Args:
            size: Side length (must be odd and positive)
            cells: Optional initial cell array of shape (size, size)

        Raises:
            ValueError: If size is not odd and positive or cells has the wrong shape
        """
        if size <= 0 or size % 2 == 0:
            raise ValueError(f"Board size must be odd and positive, got {size}")

        self.size = size
        if cells is None:
            self._cells = np.zeros((size, size), dtype=np.int8)
        else:
            arr = np.asarray(cells, dtype=np.int8)
            if arr.shape != (size, size):
                raise ValueError(f"Cell array shape {arr.shape} doesn't match board size {size}")
            self._cells = (arr > 0).astype(np.int8)

    @classmethod
    def from_cells(cls, cells: np.ndarray) -> "Board":
        """Build a board from a square cell array."""
        arr = np.asarray(cells)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise ValueError(f"Board cells must be square, got shape {arr.shape}")
        return cls(arr.shape[0], arr)

    @classmethod
    def from_list(cls, data: List[List[int]]) -> "Board":
        """Load a board from a nested list of 0/1 values."""
        return cls.from_cells(np.array(data, dtype=np.int8))

    @classmethod
    def seed(cls) -> "Board":
        """The 1x1 board holding a single live cell."""
        return cls(1, np.ones((1, 1), dtype=np.int8))

    @property
    def cells(self) -> np.ndarray:
        """Get the cell array."""
        return self._cells

    @property
    def center(self) -> int:
        """Index of the center row and column."""
        return self.size // 2

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.sum(self._cells > 0))

    def get_cell(self, row: int, col: int) -> bool:
        """Get the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Coordinates ({row}, {col}) out of bounds")
        return bool(self._cells[row, col])

    def set_cell(self, row: int, col: int, alive: bool) -> None:
        """Set the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Coordinates ({row}, {col}) out of bounds")
        self._cells[row, col] = 1 if alive else 0

    def count_all_neighbors(self) -> np.ndarray:
        """Count live neighbors for all cells using a PyTorch convolution.

        Zero padding keeps the count bounded: nothing wraps around the edges.

        Returns:
            2D int8 array with neighbor counts (0-8) for each cell
        """
        torch_input = torch.from_numpy((self._cells > 0).astype(np.float32)).unsqueeze(0).unsqueeze(0)
        neighbors = F.conv2d(torch_input, _NEIGHBOR_KERNEL, padding=1)
        return neighbors[0, 0].numpy().astype(np.int8)

    def border_is_dead(self) -> bool:
        """Whether every cell of the outer ring is dead."""
        cells = self._cells
        return not (cells[0, :].any() or cells[-1, :].any() or cells[:, 0].any() or cells[:, -1].any())

    def is_symmetric(self) -> bool:
        """Whether the board is invariant under all 8 symmetries of the square."""
        cells = self._cells
        return (
            np.array_equal(cells, cells.T)
            and np.array_equal(cells, np.fliplr(cells))
            and np.array_equal(cells, np.flipud(cells))
        )

    def copy(self) -> "Board":
        """Return an independent copy of this board."""
        return Board(self.size, self._cells.copy())

    def to_list(self) -> list:
        """Convert board to nested list for serialization."""
        return self._cells.tolist()

    def __eq__(self, other: object) -> bool:
        """Check if two boards are equal."""
        if not isinstance(other, Board):
            return False
        return self.size == other.size and np.array_equal(self._cells, other._cells)

    def __repr__(self) -> str:
        return f"Board(size={self.size}, population={self.population})"

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        return "\n".join("".join("*" if cell else "." for cell in row) for row in self._cells)
