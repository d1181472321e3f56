import random

from keychase.common.types import CharacterKind
from keychase.engine.engine import GameEngine
from keychase.engine.geometry import Pos
from keychase.engine.movement import enemy_diff_trunc, enemy_dest
from keychase.engine.scheduler import ManualScheduler


def _make_engine(seed: int = 1) -> GameEngine:
    engine = GameEngine(ManualScheduler(), seed=seed)
    engine.restart()
    return engine


def test_diff_trunc_is_always_a_unit_step():
    rng = random.Random(0)
    for _ in range(500):
        origin = Pos(rng.randint(0, 19), rng.randint(0, 19))
        dest = Pos(rng.randint(-10, 30), rng.randint(-10, 30))
        step = enemy_diff_trunc(origin, dest, rng)
        assert step.x in (-1, 0, 1)
        assert step.y in (-1, 0, 1)
        if origin != dest:
            assert step != Pos(0, 0)


def test_diff_trunc_axis_and_diagonal_are_exact():
    rng = random.Random(1)
    assert enemy_diff_trunc(Pos(5, 5), Pos(5, 0), rng) == Pos(0, -1)
    assert enemy_diff_trunc(Pos(5, 5), Pos(12, 5), rng) == Pos(1, 0)
    assert enemy_diff_trunc(Pos(5, 5), Pos(1, 9), rng) == Pos(-1, 1)
    assert enemy_diff_trunc(Pos(5, 5), Pos(5, 5), rng) == Pos(0, 0)


def test_diff_trunc_near_axis_prefers_axis():
    rng = random.Random(2)
    steps = [enemy_diff_trunc(Pos(0, 0), Pos(10, 1), rng) for _ in range(2000)]
    assert set(steps) <= {Pos(1, 0), Pos(1, 1)}
    axis_share = steps.count(Pos(1, 0)) / len(steps)
    # axis_percent = 9 / 11
    assert abs(axis_share - 9 / 11) < 0.04


def test_enemy_dest_takes_free_step():
    engine = _make_engine()
    grid = engine.state.grid
    assert enemy_dest(grid, Pos(1, 1), Pos(1, 8), engine.rng) == Pos(1, 2)


def test_enemy_dest_falls_back_when_blocked():
    engine = _make_engine(seed=3)
    engine.move_char_off_of(CharacterKind.RUNNER)
    engine.move_char_onto(CharacterKind.RUNNER, Pos(2, 1))
    grid = engine.state.grid
    for _ in range(50):
        dest = enemy_dest(grid, Pos(1, 1), Pos(9, 1), engine.rng)
        # The three cells closest to (3, 1), two steps ahead.
        assert dest in {Pos(2, 0), Pos(2, 2), Pos(1, 1)}


def test_enemy_dest_falls_back_when_out_of_bounds():
    engine = _make_engine(seed=4)
    grid = engine.state.grid
    for _ in range(50):
        dest = enemy_dest(grid, Pos(0, 0), Pos(-5, 0), engine.rng)
        assert dest.in_bounds(20)
        assert max(abs(dest.x), abs(dest.y)) <= 1
        assert not grid.is_character(grid.tile_at(dest))
