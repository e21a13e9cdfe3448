import pytest

from engine.playback import BASE_INTERVAL, ControlOptions, PlaybackEngine, PlaybackState


def make_engine(scheduler, n=3):
    engine = PlaybackEngine(target="demo", scheduler=scheduler)
    renders = []
    engine.register_on_reset(lambda: [f"s{i}" for i in range(n)])
    engine.register_on_step(engine.advance)
    engine.register_on_render(lambda: renders.append(engine.position))
    return engine, renders


def test_starts_idle_and_play_is_a_noop(scheduler):
    engine, _ = make_engine(scheduler)
    assert engine.state is PlaybackState.IDLE
    engine.play()
    engine.step_once()
    assert engine.state is PlaybackState.IDLE
    assert scheduler.pending() == 0


def test_reset_rewinds_and_renders(scheduler):
    engine, renders = make_engine(scheduler)
    engine.reset()
    assert engine.state is PlaybackState.READY
    assert engine.position == 0
    assert engine.length == 3
    assert engine.current_step == "s0"
    assert renders == [0]


def test_play_ticks_to_finish(clock, scheduler):
    engine, renders = make_engine(scheduler)
    engine.reset()
    engine.play()
    assert engine.is_playing

    clock.t = 0.5
    scheduler.run_pending()
    assert engine.position == 1
    clock.t = 1.0
    scheduler.run_pending()
    assert engine.position == 2
    clock.t = 1.5
    scheduler.run_pending()

    assert engine.state is PlaybackState.FINISHED
    assert engine.position == 2
    assert renders == [0, 1, 2]
    assert scheduler.pending() == 0


def test_pause_cancels_the_pending_tick(clock, scheduler):
    engine, _ = make_engine(scheduler)
    engine.reset()
    engine.play()
    engine.pause()
    assert engine.state is PlaybackState.PAUSED
    clock.t = 10
    scheduler.run_pending()
    assert engine.position == 0

    engine.play()
    clock.t = 10.5
    scheduler.run_pending()
    assert engine.position == 1


def test_stale_tick_cannot_move_cursor_after_reset(clock, scheduler):
    engine, _ = make_engine(scheduler, n=5)
    engine.reset()
    engine.play()
    stale = engine._timer
    engine.reset()
    # a callback that slipped past cancellation is still ignored
    stale.callback()
    assert engine.position == 0
    assert engine.state is PlaybackState.READY


def test_play_twice_keeps_one_timer(scheduler):
    engine, _ = make_engine(scheduler)
    engine.reset()
    engine.play()
    engine.play()
    assert scheduler.pending() == 1


def test_step_once_is_synchronous(scheduler):
    engine, renders = make_engine(scheduler)
    engine.reset()
    engine.step_once()
    assert engine.position == 1
    assert engine.state is PlaybackState.READY
    assert scheduler.pending() == 0
    engine.step_once()
    engine.step_once()
    assert engine.state is PlaybackState.FINISHED
    # finished: further steps are ignored
    engine.step_once()
    assert engine.position == 2
    assert renders == [0, 1, 2]


def test_speed_applies_from_next_tick(clock, scheduler):
    engine, _ = make_engine(scheduler, n=5)
    engine.reset()
    engine.play()
    engine.set_speed(2)
    assert engine.interval == BASE_INTERVAL / 2

    clock.t = 0.5           # first tick was armed at 1x
    scheduler.run_pending()
    assert engine.position == 1
    clock.t = 0.75          # next one at 2x
    scheduler.run_pending()
    assert engine.position == 2


@pytest.mark.parametrize("value, expected", [
    (10, 4), (0.01, 0.25), ("1.5", 1.5), ("fast", 1.0), (None, 1.0), (float("nan"), 1.0),
])
def test_set_speed_clamps_and_ignores_garbage(scheduler, value, expected):
    engine, _ = make_engine(scheduler)
    engine.set_speed(value)
    assert engine.speed == expected


def test_empty_sequence_cannot_play(scheduler):
    engine, renders = make_engine(scheduler, n=0)
    engine.reset()
    assert engine.state is PlaybackState.READY
    assert engine.current_step is None
    engine.play()
    assert engine.state is PlaybackState.READY
    assert renders == []


def test_single_step_finishes_on_first_tick(scheduler):
    engine, _ = make_engine(scheduler, n=1)
    engine.reset()
    engine.step_once()
    assert engine.is_finished
    assert engine.position == 0


def test_custom_advancer_false_means_finished(scheduler):
    engine, _ = make_engine(scheduler, n=3)
    engine.register_on_step(lambda: False)
    engine.reset()
    engine.step_once()
    assert engine.is_finished
    assert engine.position == 0


def test_advancer_error_stops_the_timer(clock, scheduler):
    engine, _ = make_engine(scheduler)

    def boom():
        raise RuntimeError("bad step")

    engine.register_on_step(boom)
    engine.reset()
    engine.play()
    clock.t = 0.5
    with pytest.raises(RuntimeError):
        scheduler.run_pending()
    assert scheduler.pending() == 0
    assert engine.state is PlaybackState.PAUSED

    # playback resumes once the step works again
    engine.register_on_step(engine.advance)
    engine.play()
    assert engine.is_playing
    clock.t = 1.0
    scheduler.run_pending()
    assert engine.position == 1


def test_render_error_pauses_playback(clock, scheduler):
    engine, _ = make_engine(scheduler)
    engine.reset()

    def broken_paint():
        raise ValueError("bad frame")

    engine.register_on_render(broken_paint)
    engine.play()
    clock.t = 0.5
    with pytest.raises(ValueError):
        scheduler.run_pending()
    assert engine.state is PlaybackState.PAUSED
    assert scheduler.pending() == 0


def test_state_change_listener_sees_every_transition(scheduler):
    engine, _ = make_engine(scheduler, n=2)
    seen = []
    engine.register_on_state_change(lambda s: seen.append(s.value))
    engine.reset()
    engine.play()
    engine.pause()
    engine.finish()
    assert seen == ["ready", "running", "paused", "finished"]


def test_registration_is_chainable_and_last_write_wins(scheduler):
    engine = PlaybackEngine(scheduler=scheduler)
    first, second = [], []
    assert engine.register_on_render(lambda: first.append(1)) is engine
    engine.register_on_render(lambda: second.append(1))
    engine.register_on_reset(lambda: ["x"])
    engine.reset()
    assert first == [] and second == [1]


def test_control_options_coerce():
    assert ControlOptions.coerce(None) == ControlOptions()
    opts = ControlOptions.coerce({"play": False})
    assert opts == ControlOptions(play=False, speed=True, step=True)
    assert ControlOptions.coerce(opts) is opts
