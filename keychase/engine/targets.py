from __future__ import annotations

import math
import random

from keychase.common.constants import TARGET_THINNESS
from keychase.common.types import CharacterKind, Coloring
from keychase.engine.choice import weighted_choice
from keychase.engine.geometry import Pos
from keychase.engine.state import GameState


def target_count(width: int) -> int:
    return math.ceil(width * width / TARGET_THINNESS)


def bell(a: Pos, b: Pos, radius: float, width: int) -> float:
    """Gaussian-shaped falloff; ``radius`` is a fraction of the grid width."""
    dist = (a - b).norm() / width
    return 2.0 ** -((2 * dist / radius) ** 2)


def spawn_targets(state: GameState, rng: random.Random) -> list[Pos]:
    """Top the targets back up to ``target_count``.

    Spawns lean toward the grid center and toward the player and nommer
    (each a bell term). Draws are without replacement. Returns the new targets.
    """
    grid = state.grid
    width = state.width
    center = Pos(width // 2, width // 2)
    player = state.characters.get(CharacterKind.PLAYER, center)
    nommer = state.characters.get(CharacterKind.NOMMER, center)
    weights: dict[Pos, float] = {}
    for tile in grid:
        if grid.is_character(tile) or tile.pos in state.targets:
            continue
        weights[tile.pos] = (
            5 / 3 * bell(center, tile.pos, 0.8, width)
            + bell(player, tile.pos, 1 / 3, width)
            + bell(nommer, tile.pos, 1 / 3, width)
        )
    spawned: list[Pos] = []
    while len(state.targets) < target_count(width) and weights:
        choice = weighted_choice(weights, rng)
        state.targets.append(choice)
        grid.tile_at(choice).coloring = Coloring.TARGET
        del weights[choice]
        spawned.append(choice)
    return spawned
