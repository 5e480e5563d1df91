"""Double-buffered generational stepping of a bounded grid under a rule."""

import logging
from typing import List, Optional, Protocol

import numpy as np

from .automaton import Rule
from .config import DEAD_GLYPH, DEFAULT_DENSITY, LIVE_GLYPH
from .grid import Cell, Grid
from .neighborhood import encode

logger = logging.getLogger(__name__)


class SurfaceCell(Protocol):
    def set_ch(self, ch: str): ...


class Surface(Protocol):
    """Anything World.render can draw on: a 2D grid of settable characters."""

    def get_mut(self, x: int, y: int) -> SurfaceCell: ...


class World:
    """A bounded automaton.

    The world owns two grids of the same size. ``step`` reads only the active
    grid and writes only the spare one, then swaps them, so every decision for
    generation N+1 is based on generation N alone.
    """

    def __init__(self, width: int, height: int, rule: Rule):
        if width < 0 or height < 0:
            raise ValueError(f"World size must be non-negative, got {width}x{height}")
        self.width = width
        self.height = height
        self.rule = rule
        self._grid = Grid((width, height))
        self._swap_grid = Grid((width, height))
        self.generation = 0
        logger.debug("Created %dx%d world", width, height)

    @property
    def grid(self) -> Grid:
        """The current generation."""
        return self._grid

    def insert(self, cell: Cell):
        self._grid.insert(cell)

    def load(self, pattern: Grid, x: int = 0, y: int = 0):
        """Copy the live cells of ``pattern`` into the world, offset by (x, y)."""
        for px, py in pattern:
            self._grid.insert((px + x, py + y))

    def clear(self):
        self._grid.clear()
        self.generation = 0

    def randomize(self, rng: Optional[np.random.Generator] = None, density: float = DEFAULT_DENSITY):
        self._grid.randomize(rng=rng, density=density)
        self.generation = 0

    def decide_next_state(self, cell: Cell) -> bool:
        return self.rule[encode(self._grid, cell)]

    def step(self):
        """Advance by one generation."""
        self._swap_grid.clear()
        for x in range(self.width):
            for y in range(self.height):
                cell = (x, y)
                if self.decide_next_state(cell):
                    self._swap_grid.insert(cell)
        self._grid, self._swap_grid = self._swap_grid, self._grid
        self.generation += 1

    def run(self, steps: int, record_history: bool = False) -> List[np.ndarray]:
        """Run for ``steps`` generations.

        With ``record_history`` the returned list holds the starting state and
        every generation after it as (height, width) arrays.
        """
        history = []
        if record_history:
            history.append(self.to_array())
        for _ in range(steps):
            self.step()
            if record_history:
                history.append(self.to_array())
        return history

    def render(self, surface: Surface, live: str = LIVE_GLYPH, dead: str = DEAD_GLYPH):
        """Draw every cell of the domain onto ``surface``."""
        for x in range(self.width):
            for y in range(self.height):
                cell = surface.get_mut(x, y)
                if self._grid.contains((x, y)):
                    cell.set_ch(live)
                else:
                    cell.set_ch(dead)

    def to_array(self) -> np.ndarray:
        return self._grid.to_array()

    def population(self) -> int:
        """Count live cells inside the domain."""
        return int(self.to_array().sum())

    def density(self) -> float:
        if self.width == 0 or self.height == 0:
            return 0.0
        return self.population() / (self.width * self.height)
