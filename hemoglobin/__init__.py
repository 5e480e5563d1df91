"""hemoglobin - generalized two-state 3x3 cellular automata driven by compact rule codes."""

from .automaton import Rule
from .errors import DecodeError
from .grid import Grid
from .neighborhood import encode
from .world import World

__all__ = ["Rule", "DecodeError", "Grid", "encode", "World"]
