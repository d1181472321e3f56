from __future__ import annotations

from keychase.common.types import Coloring
from keychase.engine.geometry import Pos
from keychase.engine.state import GameState


def trail_allowance(score: int, losses: int) -> float:
    """Longest trail allowed for this score, or -1 when losses dominate."""
    net = score - 0.9 * losses
    if net < 0:
        return -1
    return net ** (3 / 7)


def trim_trail(state: GameState) -> list[Pos]:
    """Evict the oldest trail entries until the trail fits its allowance."""
    evicted: list[Pos] = []
    allowance = trail_allowance(state.score, state.losses)
    while state.trail and len(state.trail) > allowance:
        pos = state.trail.pop(0)
        tile = state.grid.tile_at(pos)
        if not state.grid.is_character(tile) and not state.is_target(pos):
            tile.coloring = Coloring.PLAIN
        evicted.append(pos)
    return evicted
