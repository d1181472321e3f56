from __future__ import annotations

from dataclasses import dataclass

from keychase.common.constants import EMPTY_KEY
from keychase.common.types import Coloring
from keychase.engine.geometry import Pos
from keychase.engine.languages import Language


@dataclass
class Tile:
    pos: Pos
    key: str = EMPTY_KEY
    coloring: Coloring = Coloring.PLAIN


class Grid:
    """Row-major ``width x width`` array of tiles for one game session."""

    def __init__(self, width: int, language: Language) -> None:
        self.width = width
        self.language = language
        self.tiles: list[Tile] = [
            Tile(pos=Pos(x, y)) for y in range(width) for x in range(width)
        ]

    def __iter__(self):
        return iter(self.tiles)

    def tile_at(self, pos: Pos) -> Tile:
        # Callers bounds-check with Pos.in_bounds first.
        return self.tiles[pos.y * self.width + pos.x]

    def is_character(self, tile: Tile) -> bool:
        return tile.key not in self.language

    def sequence(self, tile: Tile) -> str | None:
        """Input sequence the player types to move onto ``tile``."""
        return self.language.get(tile.key)

    def adjacent(self, pos: Pos, radius: int = 1) -> list[Tile]:
        """Return tiles in the (2*radius + 1)^2 box around pos holding a language key.

        Tiles with a character on them (or not yet shuffled) are left out.
        """
        y_lower = max(0, pos.y - radius)
        y_upper = min(self.width, pos.y + radius + 1)
        x_lower = max(0, pos.x - radius)
        x_upper = min(self.width, pos.x + radius + 1)
        neighbors: list[Tile] = []
        for y in range(y_lower, y_upper):
            for x in range(x_lower, x_upper):
                tile = self.tiles[y * self.width + x]
                if not self.is_character(tile):
                    neighbors.append(tile)
        return neighbors
