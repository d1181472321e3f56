from __future__ import annotations

from typing import TYPE_CHECKING

from keychase.common.constants import BACKTRACK_KEY
from keychase.common.types import CharacterKind, Coloring, Effect
from keychase.engine.trail import trim_trail

if TYPE_CHECKING:
    from keychase.engine.engine import GameEngine


def handle_key(engine: GameEngine, key: str) -> bool:
    """Feed one keystroke to the player's input buffer.

    The player moves once the buffer ends with the sequence of exactly one
    free adjacent tile. No match, or several, leaves the buffer growing.
    """
    if key == BACKTRACK_KEY:
        return backtrack(engine)
    state = engine.state
    grid = state.grid
    max_len = max(len(seq) for seq in grid.language.values())
    state.move_str = (state.move_str + key.lower())[-max_len:]
    here = state.characters[CharacterKind.PLAYER]
    matches = [
        tile
        for tile in grid.adjacent(here)
        if state.move_str.endswith(grid.sequence(tile))
    ]
    if len(matches) != 1:
        return False
    state.move_str = ""
    now = engine.clock()
    state.time_deltas.append(now - state.last_move_at)
    state.last_move_at = now

    engine.move_char_off_of(CharacterKind.PLAYER)
    if not state.is_target(here):
        grid.tile_at(here).coloring = Coloring.TRAIL
    if here in state.trail:
        state.trail.remove(here)
    state.trail.append(here)
    trim_trail(state)
    engine.move_char_onto(CharacterKind.PLAYER, matches[0].pos, hungry=True)
    engine.emit(Effect.MOVE)
    return True


def backtrack(engine: GameEngine) -> bool:
    """Step back onto the newest trail cell unless the trail is empty or blocked."""
    state = engine.state
    if not state.trail:
        return False
    last = state.trail[-1]
    if state.grid.is_character(state.grid.tile_at(last)):
        return False
    engine.move_char_off_of(CharacterKind.PLAYER)
    state.trail.pop()
    engine.move_char_onto(CharacterKind.PLAYER, last)
    engine.emit(Effect.MOVE)
    return True
