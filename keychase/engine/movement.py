from __future__ import annotations

import random

from keychase.common.constants import ALTERNATIVE_COUNT
from keychase.engine.choice import weighted_choice
from keychase.engine.geometry import Pos
from keychase.engine.grid import Grid, Tile


def enemy_diff_trunc(origin: Pos, dest: Pos, rng: random.Random) -> Pos:
    """Return a unit step from origin toward dest.

    Off-axis, off-diagonal approaches keep the diagonal with probability
    ``1 - axis_percent``; otherwise the minor axis is dropped. Near-axis
    approaches therefore snap to the axis more often.
    """
    diff = dest - origin
    if diff.x == 0 or diff.y == 0 or abs(diff.x) == abs(diff.y):
        return diff.trunc()
    mag = diff.abs()
    axis_percent = abs(mag.x - mag.y) / (mag.x + mag.y)
    drop_diagonal = weighted_choice({True: axis_percent, False: 1 - axis_percent}, rng)
    if drop_diagonal:
        if mag.x > mag.y:
            diff = Pos(diff.x, 0)
        else:
            diff = Pos(0, diff.y)
    return diff.trunc()


def enemy_dest(grid: Grid, origin: Pos, dest: Pos, rng: random.Random) -> Pos:
    """Resolve one enemy step from origin toward dest.

    The mover's own tile must already be vacated. When the desired cell is
    off the grid or held by a character, fall back to a weighted pick among
    the free cells around origin.
    """
    diff = enemy_diff_trunc(origin, dest, rng)
    desired = origin + diff
    if desired.in_bounds(grid.width) and not grid.is_character(grid.tile_at(desired)):
        return desired

    ahead = origin + diff * 2

    def pref(tile: Tile) -> int:
        return (ahead - tile.pos).linear_norm()

    alts = sorted(grid.adjacent(origin), key=pref)[:ALTERNATIVE_COUNT]
    weights = {tile.pos: 4.0 ** pref(tile) for tile in alts}
    return weighted_choice(weights, rng)
