"""Encoding of a cell's 3x3 neighborhood into a rule-table index."""

from typing import List, Tuple

import numpy as np

from .grid import Cell, Grid

# (dxi, dyi) index pairs over the 3x3 block; the neighbor of (x, y) at
# (dxi, dyi) is (x + dxi - 1, y + dyi - 1) and owns bit dxi + 3 * dyi.
NEIGHBORHOOD_OFFSETS: List[Tuple[int, int]] = [(dxi, dyi) for dxi in range(3) for dyi in range(3)]

CENTER_BIT = 4
NUM_STATES = 1 << len(NEIGHBORHOOD_OFFSETS)


def encode(grid: Grid, cell: Cell) -> int:
    """Return the neighbor-state code (0-511) of ``cell`` in ``grid``.

    Bit layout, with the cell itself in the middle:

        1   2   4
        8  16  32
       64 128 256

    Positions left of column 0 or above row 0 count as dead.
    """
    x, y = cell
    code = 0
    for dxi, dyi in NEIGHBORHOOD_OFFSETS:
        nx = x + dxi
        ny = y + dyi
        # Shifted by one so the check happens before any coordinate can go negative
        if nx < 1 or ny < 1:
            continue
        if grid.contains((nx - 1, ny - 1)):
            code |= 1 << (dxi + 3 * dyi)
    return code


def decode_state(code: int) -> np.ndarray:
    """Expand a neighbor-state code into a (3, 3) boolean block indexed [dyi, dxi]."""
    if not 0 <= code < NUM_STATES:
        raise ValueError(f"Neighbor-state code must be in [0, {NUM_STATES}), got {code}")
    bits = [(code >> i) & 1 for i in range(NUM_STATES.bit_length() - 1)]
    return np.array(bits, dtype=bool).reshape(3, 3)


def live_neighbors(code: int) -> int:
    """Number of live cells among the 8 neighbors, ignoring the center."""
    return bin(code & ~(1 << CENTER_BIT)).count("1")


def center_alive(code: int) -> bool:
    return bool((code >> CENTER_BIT) & 1)
