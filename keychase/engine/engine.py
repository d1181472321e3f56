from __future__ import annotations

import logging
import math
import random
import time
from collections.abc import Callable

from keychase.common.constants import (
    CHASER_INTERVAL_MS,
    EMPTY_KEY,
    ENEMIES,
    FACES,
    MIN_GRID_WIDTH,
    NOMMER_INTERVAL_MS,
    RECENT_MOVES,
    RUNNER_INTERVAL_MS,
    SPAWN_CORNER_PADDING,
    UNPAUSE_DELAY_MS,
)
from keychase.common.errors import IllegalMove
from keychase.common.types import CharacterKind, Coloring, Effect
from keychase.engine import enemies, player
from keychase.engine.geometry import Pos
from keychase.engine.grid import Grid
from keychase.engine.keys import shuffle
from keychase.engine.languages import get_language
from keychase.engine.scheduler import RepeatingTask, Scheduler
from keychase.engine.state import GameState
from keychase.engine.targets import spawn_targets, target_count
from keychase.engine.trail import trim_trail

logger = logging.getLogger(__name__)


class GameEngine:
    """Owns one game session and wires input, enemy ticks and bookkeeping together."""

    def __init__(
        self,
        scheduler: Scheduler,
        width: int = 20,
        language: str = "english_lower",
        seed: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        chaser_interval_ms: int = CHASER_INTERVAL_MS,
        nommer_interval_ms: int = NOMMER_INTERVAL_MS,
        runner_interval_ms: int = RUNNER_INTERVAL_MS,
        unpause_delay_ms: int = UNPAUSE_DELAY_MS,
    ) -> None:
        if width < MIN_GRID_WIDTH:
            raise ValueError(f"Grid width must be at least {MIN_GRID_WIDTH}, got {width}")
        self.width = width
        self.language_name = language
        self.language = get_language(language)
        self.rng = random.Random(seed)
        self.clock = clock
        self.scheduler = scheduler
        self.unpause_delay_ms = unpause_delay_ms
        self.tasks: dict[CharacterKind, RepeatingTask] = {
            CharacterKind.CHASER: RepeatingTask(
                scheduler, chaser_interval_ms, self._enemy_tick(enemies.move_chaser), "chaser"
            ),
            CharacterKind.NOMMER: RepeatingTask(
                scheduler, nommer_interval_ms, self._enemy_tick(enemies.move_nommer), "nommer"
            ),
            CharacterKind.RUNNER: RepeatingTask(
                scheduler, runner_interval_ms, self._enemy_tick(enemies.move_runner), "runner"
            ),
        }
        self.listeners: list[Callable[[GameEngine], None]] = []
        self.effect_hooks: list[Callable[[Effect], None]] = []
        self.pending_effects: list[Effect] = []
        self.state = self._new_state()

    @property
    def num_targets(self) -> int:
        return target_count(self.width)

    # Session lifecycle

    def restart(self) -> None:
        """Reshuffle the whole grid, reset scores and start the enemies moving."""
        self.pause()
        self.state = self._new_state()
        self.pending_effects.clear()
        grid = self.state.grid
        for tile in grid:
            shuffle(grid, self.state.populations, tile.pos, self.rng)
        self._spawn_characters()
        spawn_targets(self.state, self.rng)
        self.state.last_move_at = self.clock()
        self.state.started = True
        logger.info(
            "Restarted game (width=%s, language=%s, targets=%s)",
            self.width,
            self.language_name,
            len(self.state.targets),
        )
        self.unpause()

    def pause(self) -> None:
        """Freeze every enemy and stop routing keystrokes."""
        for task in self.tasks.values():
            task.cancel()
        if not self.state.paused:
            logger.debug("Paused")
        self.state.paused = True

    def unpause(self) -> None:
        if self.state.game_over or not self.state.started:
            return
        self.state.paused = False
        for task in self.tasks.values():
            task.start(self.unpause_delay_ms)
        logger.debug("Unpaused; enemies resume in %sms", self.unpause_delay_ms)

    def toggle_pause(self) -> None:
        if self.state.paused:
            self.unpause()
        else:
            self.pause()

    def game_over(self) -> None:
        """Freeze the game until an explicit restart."""
        self.state.game_over = True
        self.pause()
        for pos in self.state.trail:
            tile = self.state.grid.tile_at(pos)
            if tile.coloring == Coloring.TRAIL:
                tile.coloring = Coloring.PLAIN
        logger.info(
            "Game over (score=%s, losses=%s, moves=%s)",
            self.state.score,
            self.state.losses,
            len(self.state.time_deltas),
        )

    # Input

    def handle_key(self, key: str) -> bool:
        """Route one keystroke to the player. Returns True if the player moved."""
        if self.state.paused or self.state.game_over:
            return False
        moved = player.handle_key(self, key)
        self._notify()
        return moved

    # Movement primitives shared by the player and the enemies

    def move_char_off_of(self, kind: CharacterKind) -> Pos:
        """Lift a character off its tile, giving the tile a fresh key."""
        state = self.state
        pos = state.characters[kind]
        tile = state.grid.tile_at(pos)
        tile.key = EMPTY_KEY
        shuffle(state.grid, state.populations, pos, self.rng)
        if state.is_target(pos):
            tile.coloring = Coloring.TARGET
        elif pos in state.trail:
            tile.coloring = Coloring.TRAIL
        else:
            tile.coloring = Coloring.PLAIN
        return pos

    def move_char_onto(self, kind: CharacterKind, dest: Pos, hungry: bool = False) -> None:
        """Place a character on dest, consuming a target there if it is hungry."""
        state = self.state
        tile = state.grid.tile_at(dest)
        if state.grid.is_character(tile):
            raise IllegalMove(f"Cannot move {kind.value} onto occupied tile {dest}")
        state.populations[tile.key] -= 1
        state.characters[kind] = dest
        tile.coloring = Coloring.for_character(kind)
        tile.key = EMPTY_KEY
        if not hungry or not state.is_target(dest):
            return
        if kind == CharacterKind.PLAYER:
            state.score += 1
            state.heat = self.num_targets * math.sqrt(state.heat / self.num_targets + 1)
            self.emit(Effect.EAT)
        else:
            state.losses += 1
        logger.debug("%s ate target at %s", kind.value, dest)
        state.targets.remove(dest)
        trim_trail(state)
        spawn_targets(state, self.rng)

    def take_off_grid(self, kind: CharacterKind) -> None:
        """Vacate a character's tile and drop it from the board."""
        self.move_char_off_of(kind)
        del self.state.characters[kind]

    # Presentation and collaborator hooks

    def add_listener(self, fn: Callable[[GameEngine], None]) -> None:
        self.listeners.append(fn)

    def add_effect_hook(self, fn: Callable[[Effect], None]) -> None:
        self.effect_hooks.append(fn)

    def emit(self, effect: Effect) -> None:
        self.pending_effects.append(effect)
        for hook in self.effect_hooks:
            hook(effect)

    def drain_effects(self) -> list[Effect]:
        effects = self.pending_effects
        self.pending_effects = []
        return effects

    def render_view(self) -> dict:
        """Snapshot of everything a renderer needs; never read back by the engine."""
        state = self.state
        grid = state.grid
        rows: list[list[dict]] = []
        for y in range(self.width):
            row: list[dict] = []
            for x in range(self.width):
                tile = grid.tile_at(Pos(x, y))
                key = tile.key
                if grid.is_character(tile):
                    key = FACES.get(tile.coloring.value, key)
                row.append({"key": key, "coloring": tile.coloring.value})
            rows.append(row)
        recent = state.time_deltas[-RECENT_MOVES:]
        return {
            "width": self.width,
            "language": self.language_name,
            "grid": rows,
            "score": state.score,
            "losses": state.losses,
            "heat": state.heat,
            "paused": state.paused,
            "game_over": state.game_over,
            "move_str": state.move_str,
            "characters": {kind.value: pos.as_tuple() for kind, pos in state.characters.items()},
            "targets": [pos.as_tuple() for pos in state.targets],
            "trail": [pos.as_tuple() for pos in state.trail],
            "mean_move_seconds": self._mean_move_seconds(recent) if state.started else None,
            "effects": [effect.value for effect in self.drain_effects()],
        }

    # Internal helpers

    def _mean_move_seconds(self, recent: list[float]) -> float:
        # The move in progress counts as one more period.
        pending = self.clock() - self.state.last_move_at
        return (sum(recent) + pending) / (len(recent) + 1)

    def _new_state(self) -> GameState:
        return GameState(
            grid=Grid(self.width, self.language),
            language_name=self.language_name,
            populations={key: 0 for key in self.language},
        )

    def _spawn_characters(self) -> None:
        mid = self.width // 2
        self.move_char_onto(CharacterKind.PLAYER, Pos(mid, mid))
        slots = Pos.corners(self.width, SPAWN_CORNER_PADDING)
        self.rng.shuffle(slots)
        for kind, slot in zip(ENEMIES, slots):
            self.move_char_onto(kind, slot)

    def _enemy_tick(self, move: Callable[[GameEngine], None]) -> Callable[[], None]:
        def tick() -> None:
            move(self)
            self._notify()

        return tick

    def _notify(self) -> None:
        for listener in self.listeners:
            listener(self)
