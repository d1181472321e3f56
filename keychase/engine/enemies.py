from __future__ import annotations

from typing import TYPE_CHECKING

from keychase.common.types import CharacterKind, Coloring
from keychase.engine.geometry import Pos
from keychase.engine.movement import enemy_dest

if TYPE_CHECKING:
    from keychase.engine.engine import GameEngine

PLAYER = CharacterKind.PLAYER
CHASER = CharacterKind.CHASER
NOMMER = CharacterKind.NOMMER
RUNNER = CharacterKind.RUNNER


def move_chaser(engine: GameEngine) -> None:
    """Step toward the player; catching the player ends the game.

    The chaser never misses.
    """
    state = engine.state
    player = state.characters[PLAYER]
    origin = state.characters[CHASER]
    if (origin - player).square_norm() == 1:
        engine.take_off_grid(CHASER)
        state.grid.tile_at(player).coloring = Coloring.CHASER
        engine.game_over()
        return
    engine.move_char_off_of(CHASER)
    dest = enemy_dest(state.grid, origin, player, engine.rng)
    engine.move_char_onto(CHASER, dest)


def nommer_goal(targets: list[Pos], player: Pos, nommer: Pos) -> Pos | None:
    """Nearest target to the nommer, ignoring the third closest to the player."""
    if not targets:
        return None
    by_player = sorted(targets, key=lambda t: (player - t).square_norm())
    contested = len(by_player) // 3
    remaining = by_player[contested:]
    return min(remaining, key=lambda t: (t - nommer).square_norm())


def move_nommer(engine: GameEngine) -> None:
    """Step toward an uncontested target and eat it on arrival."""
    state = engine.state
    origin = state.characters[NOMMER]
    engine.move_char_off_of(NOMMER)
    goal = nommer_goal(state.targets, state.characters[PLAYER], origin)
    if state.heat - 1 >= 0:
        state.heat -= 1
    if goal is None:
        goal = origin
    dest = enemy_dest(state.grid, origin, goal, engine.rng)
    engine.move_char_onto(NOMMER, dest, hungry=True)


def corner_strat0(width: int, runner: Pos, player: Pos) -> Pos:
    """Pick the corner nearest the runner, skipping the two nearest the player."""
    corners = Pos.corners(width, width // 6)

    def dist(c: Pos) -> int:
        return (runner - c).square_norm()

    def danger(c: Pos) -> int:
        return (player - c).square_norm()

    corners.sort(key=dist, reverse=True)
    corners.sort(key=danger)
    return min(corners[2:], key=dist)


def move_runner(engine: GameEngine) -> None:
    """Keep away from the player.

    At a safe distance the runner shadows the chaser while backing off the
    nommer. Otherwise it heads for a far corner with a push away from the
    player. Being caught by the player cuts losses to two thirds.
    """
    state = engine.state
    width = state.width
    origin = state.characters[RUNNER]
    player = state.characters[PLAYER]
    engine.move_char_off_of(RUNNER)

    if (player - origin).square_norm() == 1:
        state.losses = state.losses * 2 // 3

    if (origin - player).norm() >= width / 2:
        chaser = state.characters.get(CHASER, origin)
        nommer = state.characters.get(NOMMER, origin)
        dest = origin + (chaser - origin) + (origin - nommer)
        dest = dest + Pos.rand(2, engine.rng)
    else:
        corner = corner_strat0(width, origin, player)
        corner_dist = (corner - origin).norm() ** 2
        from_player = origin - player
        from_player = from_player * ((corner_dist / from_player.norm()) ** 0.3)
        dest = corner + from_player

    dest = enemy_dest(state.grid, origin, dest, engine.rng)
    engine.move_char_onto(RUNNER, dest)
