"""In-memory character canvas usable as a World.render surface."""

from typing import List


class CanvasCell:
    __slots__ = ("ch",)

    def __init__(self, ch: str = " "):
        self.ch = ch

    def set_ch(self, ch: str):
        self.ch = ch


class TextCanvas:
    """A width x height block of characters, addressed as (x, y)."""

    def __init__(self, width: int, height: int, fill: str = " "):
        self.width = width
        self.height = height
        self._cells = [[CanvasCell(fill) for _ in range(width)] for _ in range(height)]

    def get_mut(self, x: int, y: int) -> CanvasCell:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} canvas")
        return self._cells[y][x]

    def rows(self) -> List[str]:
        return ["".join(cell.ch for cell in row) for row in self._cells]

    def to_text(self) -> str:
        return "\n".join(self.rows())
