from dataclasses import replace

import numpy as np
import pytest

from robochomp.engine import GameSession, initial_snapshot, tick
from robochomp.entities import Direction, GameStatus, PowerUpState, Projectile, Snapshot
from robochomp.ghost_ai import legal_directions
from robochomp.grid import Grid
from robochomp.levels import LEVELS
from robochomp.movement import next_position

# Player left of a pellet, ghost closing in from the right; the ghost's only
# way out of its spawn is left. The boxed pellet at (1, 3) keeps the level open.
SHOWDOWN = [
    "#####",
    "#P.G#",
    "#####",
    "#.###",
    "#####",
]


def session_for(level, seed=0):
    session = GameSession([level], seed=seed)
    session.load_level(0)
    return session


def test_initial_snapshot_from_spawn_tiles():
    level = LEVELS[0]
    snapshot = initial_snapshot(level)
    grid = Grid.from_level(level)
    assert snapshot.status == GameStatus.PLAYING
    assert snapshot.player.position == grid.cells_of(3)[0]
    assert snapshot.player.direction == Direction.STOP
    assert [g.id for g in snapshot.ghosts] == [1, 2, 3, 4]
    assert all(g.position == g.spawn and g.direction == Direction.UP for g in snapshot.ghosts)
    assert snapshot.pellets.isdisjoint(snapshot.power_pellets)
    assert snapshot.initial_pellet_count == snapshot.pellets_left > 0


def test_roster_is_capped(make_level):
    level = make_level(["GGGGGGP."])
    assert len(initial_snapshot(level).ghosts) == 4


def test_pellet_scenario(make_level):
    level = make_level([
        "###",
        "P. ",
        "###",
    ])
    session = session_for(level)
    assert session.snapshot.player.position == (0, 1)
    session.queue_direction(Direction.RIGHT)
    snapshot = session.tick()
    assert snapshot.player.position == (1, 1)
    assert snapshot.pellets == frozenset()
    assert snapshot.score == 10
    assert snapshot.status == GameStatus.WON


def test_lethal_ghost_short_circuits_tick(make_level):
    session = session_for(make_level(SHOWDOWN))
    session.queue_direction(Direction.RIGHT)
    before = session.snapshot

    snapshot = session.tick()
    assert snapshot.status == GameStatus.LOST
    assert snapshot.player.position == (2, 1)
    assert snapshot.ghosts[0].position == (2, 1)
    assert (2, 1) in snapshot.pellets
    assert snapshot.pellets == before.pellets
    assert snapshot.power_up == before.power_up
    assert snapshot.score == before.score


def test_frightened_ghost_is_captured(make_level):
    session = session_for(make_level(SHOWDOWN))
    session.queue_direction(Direction.RIGHT)
    session.snapshot = replace(session.snapshot, power_up=PowerUpState(active=True, timer=10))

    snapshot = session.tick()
    assert snapshot.status == GameStatus.PLAYING
    ghost = snapshot.ghosts[0]
    assert ghost.position == ghost.spawn == (3, 1)
    assert not ghost.frightened
    assert snapshot.score == 200 + 10
    assert snapshot.power_up == PowerUpState(active=True, timer=9)


def test_loss_requires_contact_this_tick(make_level):
    level = make_level([
        "#######",
        "#P.  G#",
        "#######",
        "#.#####",
        "#######",
    ])
    session = session_for(level)
    session.queue_direction(Direction.RIGHT)
    snapshot = session.tick()
    assert snapshot.status == GameStatus.PLAYING
    assert snapshot.player.position == (2, 1)
    assert snapshot.ghosts[0].position == (4, 1)


def test_projectile_hit_during_tick(make_level):
    level = make_level([
        "#######",
        "#P   G#",
        "#######",
        "#.#####",
        "#######",
    ])
    session = session_for(level)
    session.queue_direction(Direction.RIGHT)
    session.fire()
    session.fire()
    assert len(session.snapshot.projectiles) == 2

    # Projectiles fly (1,1)->(2,1)->(3,1); the ghost walks (5,1)->(4,1)->(3,1)
    session.tick()
    snapshot = session.tick()
    assert snapshot.status == GameStatus.PLAYING
    assert snapshot.score == 100
    assert snapshot.ghosts[0].position == (5, 1)
    # The second shot finds the cell already cleared
    assert [(p.id, p.position) for p in snapshot.projectiles] == [(2, (3, 1))]


def test_power_up_timeline(make_level):
    level = make_level([
        "#######",
        "#Po   #",
        "#######",
        "#.#G###",
        "#######",
    ], tick_interval_ms=150, power_up_duration_ms=600)
    session = session_for(level)
    session.queue_direction(Direction.RIGHT)

    timers, frightened = [], []
    for _ in range(6):
        snapshot = session.tick()
        timers.append(snapshot.power_up.timer)
        frightened.append(snapshot.ghosts[0].frightened)

    assert timers == [4, 3, 2, 1, 0, 0]
    assert frightened == [True, True, True, True, False, False]
    assert session.snapshot.score == 50


def test_level_without_pellets_never_wins(make_level):
    session = session_for(make_level(["#P #"]))
    session.queue_direction(Direction.RIGHT)
    for _ in range(3):
        assert session.tick().status == GameStatus.PLAYING


def test_tick_is_a_noop_outside_play(make_level):
    level = make_level(["P."])
    for status in (GameStatus.WON, GameStatus.LOST, GameStatus.PAUSED):
        snapshot = replace(initial_snapshot(level), status=status)
        assert tick(snapshot, level, np.random.default_rng(0)) is snapshot
    assert tick(Snapshot(status=GameStatus.PLAYING), level, np.random.default_rng(0)).ticks == 0


def test_session_starts_paused_and_ignores_input():
    session = GameSession(seed=0)
    assert session.status == GameStatus.PAUSED
    assert session.queue_direction(Direction.UP).player is None
    assert session.fire().projectiles == ()
    assert session.tick().ticks == 0


def test_queue_direction_only_touches_queued_field():
    session = GameSession(seed=0)
    session.load_level(0)
    before = session.snapshot
    after = session.queue_direction(Direction.LEFT)
    assert after.player.next_direction == Direction.LEFT
    assert after.player.position == before.player.position
    assert after.player.direction == before.player.direction
    assert session.queue_direction(Direction.STOP).player.next_direction == Direction.LEFT


def test_unknown_level_index():
    session = GameSession(seed=0)
    with pytest.raises(IndexError):
        session.load_level(len(LEVELS))


def test_restart_and_next_level(make_level):
    easy = make_level(["P."])
    session = GameSession([easy, easy], seed=0)
    session.load_level(0)

    # Only from WON
    assert session.next_level().score == 0 and session.level_index == 0

    session.queue_direction(Direction.RIGHT)
    assert session.tick().status == GameStatus.WON
    snapshot = session.next_level()
    assert session.level_index == 1
    assert snapshot.status == GameStatus.PLAYING
    assert snapshot.score == 10

    session.queue_direction(Direction.RIGHT)
    session.tick()
    assert session.is_last_level
    assert session.next_level().status == GameStatus.WON

    snapshot = session.restart()
    assert session.level_index == 0
    assert snapshot.score == 0
    assert snapshot.status == GameStatus.PLAYING


def _run(seed, ticks=400):
    rng = np.random.default_rng(seed)
    session = GameSession(seed=seed)
    session.load_level(0)
    grid = session.grid
    history = [session.snapshot]
    directions = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]

    for _ in range(ticks):
        if session.status != GameStatus.PLAYING:
            session.restart()
            history.append(session.snapshot)
        if rng.random() < 0.3:
            session.queue_direction(directions[int(rng.integers(4))])
        if rng.random() < 0.2:
            session.fire()
            assert len(session.snapshot.projectiles) <= 3
        history.append(session.tick())
    return grid, history


def test_invariants_over_random_play():
    grid, history = _run(seed=7)
    for prev, snapshot in zip(history, history[1:]):
        assert not grid.is_wall(snapshot.player.position)
        assert len(snapshot.projectiles) <= 3
        assert snapshot.pellets.isdisjoint(snapshot.power_pellets)
        for ghost in snapshot.ghosts:
            assert not grid.is_wall(ghost.position)
        if snapshot.ticks != prev.ticks + 1:
            continue

        assert snapshot.score >= prev.score
        assert snapshot.pellets <= prev.pellets
        assert snapshot.power_pellets <= prev.power_pellets

        for before, after in zip(prev.ghosts, snapshot.ghosts):
            moved = after.position == next_position(before.position, after.direction, grid.width)
            if moved and after.direction != Direction.STOP and after.direction == before.direction.opposite:
                assert legal_directions(before.position, grid) == [after.direction]

        if snapshot.power_up.active and snapshot.status == GameStatus.PLAYING:
            spawned = {g.id for g in snapshot.ghosts if g.position == g.spawn}
            assert all(g.frightened for g in snapshot.ghosts if g.id not in spawned)

        on_player = [g for g in snapshot.ghosts if g.position == snapshot.player.position and not g.frightened]
        if snapshot.status == GameStatus.LOST:
            assert on_player
        else:
            # A ghost captured on its own spawn cell is sent back to where it stands
            assert all(g.position == g.spawn for g in on_player)


def test_seeded_sessions_are_reproducible():
    _, first = _run(seed=3, ticks=150)
    _, second = _run(seed=3, ticks=150)
    assert first == second
