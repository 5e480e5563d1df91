"""Shared constants and run configuration."""

from dataclasses import dataclass
from typing import Optional

# Probability that a cell starts alive when a grid is randomized
DEFAULT_DENSITY = 0.1

# Character marking a live cell in pattern text
LIVE_MARKER = "#"

# Glyphs written by World.render
LIVE_GLYPH = "█"
DEAD_GLYPH = " "

# One entry per 3x3 neighborhood configuration
TABLE_SIZE = 512

# Payload length of a textual rule code; only the low
# RULE_CODE_BYTES * 8 table entries are reachable through it.
RULE_CODE_BYTES = 8


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of a single simulation run."""
    width: int = 80
    height: int = 24
    steps: int = 100
    density: float = DEFAULT_DENSITY
    seed: Optional[int] = None

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Grid size must be non-negative, got {self.width}x{self.height}")
        if self.steps < 0:
            raise ValueError(f"Step count must be non-negative, got {self.steps}")
        if not 0.0 <= self.density <= 1.0:
            raise ValueError(f"Density must be in [0, 1], got {self.density}")
