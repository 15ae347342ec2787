import pytest

from sjf_visualizer.config import PlaybackSettings
from sjf_visualizer.errors import EmptyResultError, ValidationError
from sjf_visualizer.models import GanttInterval, Process, SimulationResult
from sjf_visualizer.playback import PlaybackEngine, PlaybackStatus, completion_fraction, drive
from sjf_visualizer.simulator import simulate_sjf


def _result():
    # Span of 10 time units.
    return simulate_sjf([Process("P1", 5, 0), Process("P2", 3, 1), Process("P3", 2, 2)])


def _engine(**settings):
    engine = PlaybackEngine(PlaybackSettings(**settings))
    engine.load(_result())
    return engine


def test_initial_state_is_idle():
    engine = PlaybackEngine()
    state = engine.state
    assert state.status is PlaybackStatus.IDLE
    assert state.cursor == 0
    assert state.playing is False
    assert state.speed_multiplier == 1.0


def test_play_without_result_is_noop():
    engine = PlaybackEngine()
    assert engine.play() is False
    assert engine.status is PlaybackStatus.IDLE
    assert engine.tick() is False


def test_bounds_require_a_result():
    engine = PlaybackEngine()
    with pytest.raises(EmptyResultError):
        engine.bounds()
    engine.load(_result())
    assert engine.bounds() == (0, 10)


def test_tick_advances_by_increment_times_speed():
    engine = _engine(tick_increment=0.5)
    assert engine.play() is True
    assert engine.tick() is True
    assert engine.cursor == pytest.approx(0.5)

    engine.set_speed(2)
    engine.tick()
    assert engine.cursor == pytest.approx(1.5)


def test_playing_stops_exactly_at_span():
    engine = _engine(tick_increment=0.3)
    engine.play()
    while engine.tick():
        assert engine.cursor <= engine.total_span
    assert engine.cursor == 10
    assert engine.status is PlaybackStatus.PAUSED
    # Finished: play does not restart from the end.
    assert engine.play() is False


def test_pause_blocks_pending_tick():
    engine = _engine(tick_increment=0.5)
    engine.play()
    engine.tick()
    engine.pause()
    assert engine.status is PlaybackStatus.PAUSED
    assert engine.tick() is False
    assert engine.cursor == pytest.approx(0.5)

    assert engine.play() is True
    engine.tick()
    assert engine.cursor == pytest.approx(1.0)


def test_reset_returns_to_idle():
    engine = _engine(tick_increment=0.5)
    engine.set_speed(4)
    engine.play()
    engine.tick()
    engine.reset()

    assert engine.tick() is False
    assert engine.state.cursor == 0
    assert engine.status is PlaybackStatus.IDLE
    assert engine.speed == 1.0


def test_load_resets_playback():
    engine = _engine()
    engine.seek(4)
    engine.play()
    engine.load(_result())
    assert engine.cursor == 0
    assert engine.status is PlaybackStatus.IDLE


def test_step_forward_lands_exactly_on_span():
    engine = PlaybackEngine(PlaybackSettings(step_increment=0.4))
    engine.load(SimulationResult(intervals=[GanttInterval("A", 0, 3)]))
    seen = []
    while engine.cursor < engine.total_span:
        seen.append(engine.step_forward())
    assert seen[-1] == 3
    assert all(v <= 3 for v in seen)
    assert engine.status is PlaybackStatus.IDLE


def test_step_back_clamps_at_zero():
    engine = _engine()
    engine.play()
    engine.pause()
    engine.seek(0.2)
    assert engine.step_back() == 0
    assert engine.step_forward() == 0.5
    assert engine.status is PlaybackStatus.PAUSED


def test_seek_clamps_and_keeps_playing():
    engine = _engine(tick_increment=0.5)
    assert engine.seek(-5) == 0
    assert engine.seek(100) == 10
    assert engine.seek(4.5) == 4.5
    assert engine.status is PlaybackStatus.IDLE

    engine.play()
    engine.seek(2)
    assert engine.status is PlaybackStatus.PLAYING
    engine.tick()
    assert engine.cursor == pytest.approx(2.5)


@pytest.mark.parametrize("bad", [0, -1, -0.5])
def test_speed_must_be_positive(bad):
    engine = PlaybackEngine()
    with pytest.raises(ValidationError):
        engine.set_speed(bad)
    assert engine.speed == 1.0


def test_progress_percent():
    engine = PlaybackEngine()
    assert engine.progress_percent == 0.0
    engine.load(_result())
    engine.seek(2.5)
    assert engine.progress_percent == pytest.approx(25.0)


def test_completion_fraction():
    iv = GanttInterval("P1", 2, 6)
    assert completion_fraction(iv, 0) == 0.0
    assert completion_fraction(iv, 2) == 0.0
    assert completion_fraction(iv, 3) == pytest.approx(0.25)
    assert completion_fraction(iv, 6) == 1.0
    assert completion_fraction(iv, 9) == 1.0

    values = [completion_fraction(iv, t / 10) for t in range(0, 80)]
    assert values == sorted(values)


def test_engine_fraction_uses_cursor():
    engine = _engine()
    engine.seek(6)
    p3 = _result().interval_for("P3")
    assert engine.fraction(p3) == pytest.approx(0.5)


def test_drive_runs_until_paused():
    engine = _engine(tick_increment=0.5)
    engine.play()
    frames = []
    sleeps = []

    ticks = drive(engine, on_frame=frames.append, frame_interval=0.01, sleep=sleeps.append)

    assert ticks == 20
    assert frames == sorted(frames)
    assert frames[-1] == 10
    assert engine.status is PlaybackStatus.PAUSED
    # No sleep after the final tick.
    assert len(sleeps) == 19


def test_drive_does_nothing_when_not_playing():
    engine = _engine()
    assert drive(engine, sleep=lambda _s: None) == 0
    assert engine.cursor == 0


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_seek_rejects_non_finite_time(bad):
    engine = _engine(tick_increment=0.5)
    engine.seek(3)
    with pytest.raises(ValidationError):
        engine.seek(bad)
    assert engine.cursor == 3

    engine.play()
    assert drive(engine, sleep=lambda _s: None) == 14
    assert engine.cursor == 10
    assert engine.status is PlaybackStatus.PAUSED


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_speed_rejects_non_finite_multiplier(bad):
    engine = PlaybackEngine()
    with pytest.raises(ValidationError):
        engine.set_speed(bad)
    assert engine.speed == 1.0


def test_tick_ignores_reported_elapsed_time():
    engine = _engine(tick_increment=0.5)
    engine.play()
    assert engine.tick(elapsed=0.25) is True
    assert engine.cursor == pytest.approx(0.5)
