from __future__ import annotations

import random

from keychase.common.constants import SHUFFLE_RADIUS
from keychase.engine.choice import weighted_choice
from keychase.engine.geometry import Pos
from keychase.engine.grid import Grid


def conflicts(seq_a: str, seq_b: str) -> bool:
    """Two sequences are ambiguous when either contains the other."""
    return seq_a in seq_b or seq_b in seq_a


def valid_keys(grid: Grid, pos: Pos) -> list[str]:
    """Keys whose sequence cannot be confused with a neighbor within SHUFFLE_RADIUS."""
    neighbor_seqs = [grid.language[t.key] for t in grid.adjacent(pos, SHUFFLE_RADIUS)]
    return [
        key
        for key, seq in grid.language.items()
        if not any(conflicts(seq, nb) for nb in neighbor_seqs)
    ]


def shuffle(grid: Grid, populations: dict[str, int], pos: Pos, rng: random.Random) -> str:
    """Assign a fresh key to the tile at pos and count it in ``populations``.

    Weights favor keys that are rare across the whole grid: each valid key
    weighs ``4 ** (lowest - population)`` where ``lowest`` is taken over every
    key, valid or not. The previous key's population is the caller's job.
    """
    lowest = min(populations.values())
    weights = {key: 4.0 ** (lowest - populations[key]) for key in valid_keys(grid, pos)}
    choice = weighted_choice(weights, rng)
    populations[choice] += 1
    grid.tile_at(pos).key = choice
    return choice
