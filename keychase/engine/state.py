from __future__ import annotations

from dataclasses import dataclass, field

from keychase.common.types import CharacterKind
from keychase.engine.geometry import Pos
from keychase.engine.grid import Grid


@dataclass
class GameState:
    """All mutable simulation state for one session (rebuilt on restart)."""

    grid: Grid
    language_name: str
    populations: dict[str, int]
    characters: dict[CharacterKind, Pos] = field(default_factory=dict)
    targets: list[Pos] = field(default_factory=list)
    trail: list[Pos] = field(default_factory=list)
    score: int = 0
    losses: int = 0
    heat: float = 0.0
    move_str: str = ""
    time_deltas: list[float] = field(default_factory=list)
    last_move_at: float = 0.0
    paused: bool = True
    started: bool = False
    game_over: bool = False

    @property
    def width(self) -> int:
        return self.grid.width

    def is_target(self, pos: Pos) -> bool:
        return pos in self.targets
