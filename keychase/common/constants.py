from __future__ import annotations

from keychase.common.types import CharacterKind

# One target per this many cells.
TARGET_THINNESS = 72

MIN_GRID_WIDTH = 12
EMPTY_KEY = "_"
BACKTRACK_KEY = " "

FACES = {
    CharacterKind.PLAYER: ":|",
    CharacterKind.CHASER: ":>",
    CharacterKind.NOMMER: ":O",
    CharacterKind.RUNNER: ":D",
}
ENEMIES = (CharacterKind.CHASER, CharacterKind.NOMMER, CharacterKind.RUNNER)

SPAWN_CORNER_PADDING = 4
SHUFFLE_RADIUS = 2
ALTERNATIVE_COUNT = 3

CHASER_INTERVAL_MS = 1100
NOMMER_INTERVAL_MS = 800
RUNNER_INTERVAL_MS = 800
UNPAUSE_DELAY_MS = 1000

# Moves averaged for the pace readout
RECENT_MOVES = 5
