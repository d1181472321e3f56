from keychase.common.types import CharacterKind, Coloring, Effect
from keychase.engine.engine import GameEngine
from keychase.engine.geometry import Pos
from keychase.engine.scheduler import ManualScheduler

PLAYER = CharacterKind.PLAYER
START = Pos(10, 10)


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _make_engine(seed: int = 1, **kwargs) -> GameEngine:
    engine = GameEngine(ManualScheduler(), seed=seed, **kwargs)
    engine.restart()
    return engine


def _clear_target(engine: GameEngine, pos: Pos) -> None:
    if pos in engine.state.targets:
        engine.state.targets.remove(pos)
        engine.state.grid.tile_at(pos).coloring = Coloring.PLAIN


def _type(engine: GameEngine, pos: Pos) -> bool:
    seq = engine.state.grid.language[engine.state.grid.tile_at(pos).key]
    moved = False
    for ch in seq:
        moved = engine.handle_key(ch)
    return moved


def test_typing_adjacent_key_moves_player():
    engine = _make_engine()
    state = engine.state
    state.score = 8
    dest = Pos(11, 11)
    assert _type(engine, dest)
    assert state.characters[PLAYER] == dest
    assert state.move_str == ""
    assert state.trail == [START]
    old_tile = state.grid.tile_at(START)
    assert old_tile.coloring == Coloring.TRAIL
    assert not state.grid.is_character(old_tile)
    assert Effect.MOVE in engine.drain_effects()


def test_trail_is_trimmed_at_zero_score():
    engine = _make_engine()
    _clear_target(engine, Pos(9, 10))
    assert _type(engine, Pos(9, 10))
    assert engine.state.trail == []
    assert engine.state.grid.tile_at(START).coloring in (Coloring.PLAIN, Coloring.TARGET)


def test_unmatched_key_keeps_typing():
    engine = _make_engine(seed=2)
    state = engine.state
    nearby = {state.grid.tile_at(t.pos).key for t in state.grid.adjacent(START)}
    missing = next(c for c in "abcdefghijklmnopqrstuvwxyz" if c not in nearby)
    assert not engine.handle_key(missing)
    assert state.characters[PLAYER] == START
    assert state.move_str == missing


def test_multi_letter_sequence_needs_every_letter():
    engine = _make_engine(seed=3, language="hiragana")
    state = engine.state
    dest = Pos(10, 9)
    seq = state.grid.language[state.grid.tile_at(dest).key]
    assert len(seq) == 2
    assert not engine.handle_key(seq[0])
    assert state.move_str == seq[0]
    assert engine.handle_key(seq[1])
    assert state.characters[PLAYER] == dest


def test_uppercase_language_accepts_lowercase_typing():
    engine = _make_engine(seed=4, language="english_upper")
    dest = Pos(10, 11)
    key = engine.state.grid.tile_at(dest).key
    assert key.isupper()
    assert engine.handle_key(key)
    assert engine.state.characters[PLAYER] == dest


def test_backtrack_returns_along_trail():
    engine = _make_engine(seed=5)
    state = engine.state
    state.score = 8
    _clear_target(engine, Pos(11, 10))
    assert _type(engine, Pos(11, 10))
    assert engine.handle_key(" ")
    assert state.characters[PLAYER] == START
    assert state.trail == []
    assert state.score == 8


def test_backtrack_with_empty_trail_is_noop():
    engine = _make_engine(seed=6)
    assert not engine.handle_key(" ")
    assert engine.state.characters[PLAYER] == START


def test_backtrack_blocked_by_character():
    engine = _make_engine(seed=7)
    state = engine.state
    state.score = 8
    assert _type(engine, Pos(11, 10))
    engine.move_char_off_of(CharacterKind.RUNNER)
    engine.move_char_onto(CharacterKind.RUNNER, START)
    assert not engine.handle_key(" ")
    assert state.characters[PLAYER] == Pos(11, 10)
    assert state.trail == [START]


def test_backtrack_does_not_eat_targets():
    engine = _make_engine(seed=8)
    state = engine.state
    state.score = 8
    _clear_target(engine, Pos(9, 9))
    assert _type(engine, Pos(9, 9))
    state.targets.append(START)
    assert engine.handle_key(" ")
    assert state.score == 8
    assert START in state.targets


def test_revisiting_a_cell_does_not_duplicate_trail():
    engine = _make_engine(seed=9)
    state = engine.state
    state.score = 100
    assert _type(engine, Pos(11, 10))
    assert _type(engine, START)
    assert _type(engine, Pos(11, 10))
    assert len(state.trail) == len(set(state.trail))


def test_keys_ignored_while_paused():
    engine = _make_engine(seed=10)
    engine.pause()
    key = engine.state.grid.tile_at(Pos(11, 10)).key
    assert not engine.handle_key(key)
    assert engine.state.characters[PLAYER] == START
    assert engine.state.move_str == ""


def test_move_records_elapsed_time():
    clock = FakeClock()
    engine = GameEngine(ManualScheduler(), seed=11, clock=clock)
    engine.restart()
    clock.now += 2.5
    assert _type(engine, Pos(10, 11))
    assert engine.state.time_deltas == [2.5]


def test_effect_hooks_hear_moves():
    engine = _make_engine(seed=12)
    heard = []
    engine.add_effect_hook(heard.append)
    _clear_target(engine, Pos(10, 9))
    assert _type(engine, Pos(10, 9))
    assert heard == [Effect.MOVE]


def test_leaving_an_uneaten_target_keeps_target_coloring():
    engine = _make_engine(seed=8)
    state = engine.state
    state.score = 8
    _clear_target(engine, Pos(9, 9))
    _clear_target(engine, Pos(11, 11))
    assert _type(engine, Pos(9, 9))
    state.targets.append(START)
    assert engine.handle_key(" ")
    assert state.characters[PLAYER] == START

    assert _type(engine, Pos(11, 11))
    assert START in state.trail
    assert START in state.targets
    assert state.grid.tile_at(START).coloring == Coloring.TARGET


def test_pace_averages_recent_moves_and_current_wait():
    clock = FakeClock()
    engine = GameEngine(ManualScheduler(), seed=13, clock=clock)
    assert engine.render_view()["mean_move_seconds"] is None
    engine.restart()
    state = engine.state
    state.time_deltas = [100.0, 1.0, 1.0, 1.0, 1.0, 1.0]
    state.last_move_at = clock.now
    clock.now += 1.0
    assert engine.render_view()["mean_move_seconds"] == 1.0
