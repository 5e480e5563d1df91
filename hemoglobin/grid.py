"""Sparse set of live cells, optionally bounded to a rectangle."""

import logging
import numbers
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set, Tuple, Union

import numpy as np

from .config import DEFAULT_DENSITY, LIVE_MARKER

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]
Bounds = Tuple[int, int]


class Grid:
    """Set of live cells.

    A bounded grid keeps only cells with ``x <= width`` and ``y <= height``;
    anything further out, or at a negative coordinate on any grid, is dropped
    on insert without complaint. Note that the bound is inclusive, so a cell
    sitting exactly on ``width`` is kept even though it lies outside the
    simulated domain ``[0, width) x [0, height)``.

    Unbounded grids are used to hold parsed patterns before they are copied
    into a world.
    """

    def __init__(self, bounds: Optional[Bounds] = None):
        if bounds is not None:
            width, height = bounds
            if not (isinstance(width, numbers.Integral) and isinstance(height, numbers.Integral)):
                raise ValueError(f"Bounds must be integers, got {bounds}")
            if width < 0 or height < 0:
                raise ValueError(f"Bounds must be non-negative, got {bounds}")
            bounds = (int(width), int(height))
        self._bounds = bounds
        self._cells: Set[Cell] = set()

    @classmethod
    def bounded(cls, width: int, height: int) -> "Grid":
        return cls((width, height))

    @classmethod
    def from_rows(cls, rows: Iterable[str], marker: str = LIVE_MARKER) -> "Grid":
        """Parse an unbounded grid from text rows.

        Row index is y and character index is x; ``marker`` is a live cell,
        every other character is dead. ``["#  ", "   ", " # "]`` has live cells
        at (0, 0) and (1, 2).
        """
        grid = cls()
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch == marker:
                    grid.insert((x, y))
        return grid

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Grid":
        """Build a bounded grid from a (height, width) array of 0/1 values."""
        height, width = array.shape
        grid = cls((width, height))
        for y, x in np.argwhere(array):
            grid.insert((int(x), int(y)))
        return grid

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def is_bounded(self) -> bool:
        return self._bounds is not None

    @property
    def width(self) -> Optional[int]:
        return None if self._bounds is None else self._bounds[0]

    @property
    def height(self) -> Optional[int]:
        return None if self._bounds is None else self._bounds[1]

    def insert(self, cell: Cell):
        x, y = cell
        if x < 0 or y < 0:
            return
        if self._bounds is not None:
            width, height = self._bounds
            if x > width or y > height:
                return
        self._cells.add((x, y))

    def contains(self, cell: Cell) -> bool:
        return cell in self._cells

    def clear(self):
        self._cells.clear()

    def randomize(self, rng: Optional[np.random.Generator] = None, density: float = DEFAULT_DENSITY):
        """Refill the bounded domain with an i.i.d. Bernoulli(density) field.

        Does nothing on an unbounded grid.
        """
        if self._bounds is None:
            logger.debug("randomize() called on an unbounded grid; ignoring")
            return
        if not 0.0 <= density <= 1.0:
            raise ValueError(f"Density must be in [0, 1], got {density}")
        if rng is None:
            rng = np.random.default_rng()

        width, height = self._bounds
        self._cells.clear()
        alive = rng.random((width, height)) < density
        for x, y in np.argwhere(alive):
            self._cells.add((int(x), int(y)))
        logger.debug("Randomized %dx%d grid at density %.3f: %d live cells",
                     width, height, density, len(self._cells))

    def to_array(self) -> np.ndarray:
        """Return a (height, width) uint8 array of the cells inside the domain.

        Unbounded grids are sized to the smallest rectangle holding every cell.
        """
        if self._bounds is None:
            width = max((x for x, _ in self._cells), default=-1) + 1
            height = max((y for _, y in self._cells), default=-1) + 1
        else:
            width, height = self._bounds
        array = np.zeros((height, width), dtype=np.uint8)
        for x, y in self._cells:
            if x < width and y < height:
                array[y, x] = 1
        return array

    def __contains__(self, cell) -> bool:
        return cell in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(sorted(self._cells))

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self._bounds == other._bounds and self._cells == other._cells

    def __repr__(self):
        return f"Grid(bounds={self._bounds}, live={len(self._cells)})"


def load_pattern(path: Union[str, Path], marker: str = LIVE_MARKER) -> Grid:
    """Read a pattern text file into an unbounded grid."""
    text = Path(path).read_text()
    return Grid.from_rows(text.splitlines(), marker=marker)


# Some well-known patterns
GLIDER = [
    " # ",
    "  #",
    "###",
]
BLINKER = [
    "###",
]
BLOCK = [
    "##",
    "##",
]
