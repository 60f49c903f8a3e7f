"""Static tile grid for maze variants."""

from __future__ import annotations

from arcade_engine.core.enums import Tile

# Text encoding used by maze layouts and snapshots.
TILE_CHARS: dict[Tile, str] = {Tile.FLOOR: " ", Tile.WALL: "#", Tile.PELLET: "."}
_CHAR_TILES: dict[str, Tile] = {c: t for t, c in TILE_CHARS.items()}


class Grid:
    """2D tile grid backed by a flat list for cache-friendly access."""

    __slots__ = ("width", "height", "_tiles")

    def __init__(self, width: int, height: int, default: Tile = Tile.FLOOR) -> None:
        self.width = width
        self.height = height
        self._tiles: list[Tile] = [default] * (width * height)

    @classmethod
    def from_rows(cls, rows: list[str] | tuple[str, ...]) -> Grid:
        """Build a grid from equal-length strings using ``TILE_CHARS``."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        grid = cls(width, height)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Maze row {y} has length {len(row)}, expected {width}")
            for x, ch in enumerate(row):
                grid._tiles[y * width + x] = _CHAR_TILES[ch]
        return grid

    # -- access --

    def get_xy(self, x: int, y: int) -> Tile:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self._tiles[y * self.width + x]
        return Tile.WALL

    def set_xy(self, x: int, y: int, tile: Tile) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._tiles[y * self.width + x] = tile

    def is_open_xy(self, x: int, y: int, wrap_x: bool = False) -> bool:
        """True unless the cell is a wall. With *wrap_x*, x is taken modulo width."""
        if wrap_x and self.width:
            x %= self.width
        return self.get_xy(x, y) != Tile.WALL

    def count(self, tile: Tile) -> int:
        return sum(1 for t in self._tiles if t == tile)

    def rows(self) -> tuple[str, ...]:
        w = self.width
        return tuple(
            "".join(TILE_CHARS[t] for t in self._tiles[y * w:(y + 1) * w])
            for y in range(self.height)
        )

    # -- copy --

    def copy(self) -> Grid:
        new = Grid.__new__(Grid)
        new.width = self.width
        new.height = self.height
        new._tiles = list(self._tiles)
        return new
