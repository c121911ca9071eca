from __future__ import annotations

import pytest

from pong_sim import FrameClock, FrameScheduler, GameConfig, PongGame, RunState


def test_clock_first_frame_runs_one_step() -> None:
    clock = FrameClock(60)
    assert clock.advance(1000.0) == 1


def test_clock_carries_leftover_time() -> None:
    clock = FrameClock(50)  # 20 ms per tick
    clock.advance(0.0)
    assert clock.advance(15.0) == 0
    assert clock.advance(30.0) == 1
    assert clock.accumulator == pytest.approx(10.0)
    assert clock.advance(50.0) == 1
    assert clock.accumulator == pytest.approx(10.0)


def test_clock_steps_average_to_tick_rate() -> None:
    clock = FrameClock(60, max_steps=10)
    clock.advance(0.0)
    total = sum(clock.advance(t * 7.0) for t in range(1, 1000))
    # 6993 ms at 60 Hz
    assert total == 419


def test_clock_caps_catchup() -> None:
    clock = FrameClock(100, max_steps=3)
    clock.advance(0.0)
    assert clock.advance(5000.0) == 3
    assert clock.accumulator == 0.0


def test_clock_ignores_backwards_time() -> None:
    clock = FrameClock(60)
    clock.advance(100.0)
    assert clock.advance(50.0) == 0
    assert clock.accumulator == 0.0


def test_scheduler_dispatch_runs_once() -> None:
    sched = FrameScheduler()
    seen = []
    sched.request(seen.append)
    assert sched.dispatch(1.0)
    assert not sched.dispatch(2.0)
    assert seen == [1.0]


def test_scheduler_cancel() -> None:
    sched = FrameScheduler()
    handle = sched.request(lambda t: None)
    sched.cancel(handle)
    assert not sched.pending
    stale = sched.request(lambda t: None)
    sched.request(lambda t: None)
    sched.cancel(stale)
    assert sched.pending


def test_game_frames_follow_tick_rate() -> None:
    cfg = GameConfig(tick_rate=50)
    game = PongGame(cfg)
    game.start()
    game.scheduler.dispatch(0.0)
    assert game.ticks == 1
    for t in (10.0, 20.0, 30.0, 40.0):
        game.scheduler.dispatch(t)
    assert game.ticks == 3
    assert game.scheduler.pending


def test_reset_stops_frame_loop(game: PongGame) -> None:
    game.start()
    game.scheduler.dispatch(0.0)
    game.reset()
    assert not game.scheduler.dispatch(100.0)
    assert game.state is RunState.STOPPED


@pytest.mark.parametrize("kwargs", [
    {"width": 0},
    {"tick_rate": 0},
    {"paddle_height": 700},
    {"max_catchup_steps": 0},
    {"pause_mode": "sleep"},
    {"ball_radius": -1},
])
def test_config_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        GameConfig(**kwargs)


def test_frame_interval() -> None:
    assert GameConfig().frame_interval_ms == pytest.approx(1000 / 60)


def test_clock_one_step_per_interval_spaced_frame() -> None:
    cfg = GameConfig()
    clock = FrameClock(cfg.tick_rate, cfg.max_catchup_steps)
    now = 0.0
    clock.advance(now)
    counts = []
    for _ in range(600):
        now += cfg.frame_interval_ms
        counts.append(clock.advance(now))
    assert counts == [1] * 600
