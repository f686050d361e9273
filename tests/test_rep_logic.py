import random

import pytest

from gym_coach.client.events import PhaseChanged, RepCompleted
from gym_coach.client.rep_logic import (
    DEBOUNCE_S,
    ExerciseConfig,
    ExerciseKind,
    Phase,
    RepState,
    get_exercise_config,
    parse_exercise,
    reset_rep_state,
    update_rep_state,
)


def feed(state, exercise, samples):
    events = []
    for metric, now in samples:
        events.extend(update_rep_state(state, exercise, metric, now))
    return events


def reps(events):
    return [e for e in events if isinstance(e, RepCompleted)]


def test_squat_config_table():
    cfg = get_exercise_config(ExerciseKind.SQUAT)
    assert (cfg.min_angle, cfg.max_angle) == (80, 170)
    assert get_exercise_config(ExerciseKind.SHOULDER_PRESS).metric_only


def test_config_rejects_inverted_thresholds():
    with pytest.raises(ValueError):
        ExerciseConfig(min_angle=170, max_angle=80)
    with pytest.raises(ValueError):
        ExerciseConfig(min_height=50, max_height=50)


def test_single_squat_rep():
    state = RepState()
    events = feed(state, ExerciseKind.SQUAT, [(175, 0.0), (75, 1.1), (175, 2.3)])

    assert [type(e) for e in events] == [PhaseChanged, RepCompleted]
    assert events[0].phase == "bottom"
    assert events[1].rep_count == 1
    assert state.rep_count == 1
    assert state.phase == Phase.TOP
    assert state.last_rep_timestamp == 2.3
    assert state.consecutive_reps == 1


def test_rep_inside_debounce_window_is_ignored():
    state = RepState()
    events = feed(state, ExerciseKind.SQUAT, [(175, 0.0), (75, 1.1), (175, 0.9)])
    assert reps(events) == []
    assert state.rep_count == 0


def test_debounce_blocks_next_descent_after_rep():
    state = RepState()
    feed(state, ExerciseKind.SQUAT, [(75, 1.1), (175, 2.3)])
    # too soon after the rep
    assert feed(state, ExerciseKind.SQUAT, [(60, 2.9)]) == []
    assert state.phase == Phase.TOP
    events = feed(state, ExerciseKind.SQUAT, [(60, 3.4), (175, 3.6)])
    assert len(reps(events)) == 1
    assert state.rep_count == 2


def test_hysteresis_band_does_nothing():
    state = RepState()
    events = feed(state, ExerciseKind.SQUAT, [(120, 2.0), (81, 3.0), (169, 4.0), (100, 5.0)])
    assert events == []
    assert state.phase == Phase.TOP

    feed(state, ExerciseKind.SQUAT, [(70, 6.0)])
    assert state.phase == Phase.BOTTOM
    assert feed(state, ExerciseKind.SQUAT, [(150, 7.0), (170, 8.0)]) == []
    assert state.phase == Phase.BOTTOM


def test_zero_metric_never_transitions():
    state = RepState()
    assert feed(state, ExerciseKind.SQUAT, [(0, 5.0)]) == []
    assert state.phase == Phase.TOP
    feed(state, ExerciseKind.SQUAT, [(70, 6.0)])
    assert feed(state, ExerciseKind.SQUAT, [(0, 8.0)]) == []
    assert state.phase == Phase.BOTTOM
    assert state.last_angle == 70


def test_bicep_curl_uses_contracted_phase():
    state = RepState()
    events = feed(state, ExerciseKind.BICEP_CURL, [(25, 2.0), (165, 3.5)])
    assert events[0].phase == "contracted"
    assert reps(events)[0].rep_count == 1


def test_pushup_thresholds():
    state = RepState()
    # 165 clears pushup max (160) but not squat max (170)
    events = feed(state, ExerciseKind.PUSHUP, [(70, 2.0), (165, 3.5)])
    assert len(reps(events)) == 1


def test_shoulder_press_is_metric_only():
    state = RepState()
    events = feed(state, ExerciseKind.SHOULDER_PRESS, [(10, 2.0), (90, 4.0), (10, 6.0), (90, 8.0)])
    assert events == []
    assert state.rep_count == 0
    assert state.last_angle == 90


def test_reset_is_idempotent():
    state = RepState(session_start_timestamp=42.0)
    feed(state, ExerciseKind.SQUAT, [(70, 2.0), (175, 3.5), (70, 5.0)])
    assert state.rep_count == 1

    reset_rep_state(state)
    once = RepState(**vars(state))
    reset_rep_state(state)

    assert state == once
    assert state.rep_count == 0
    assert state.phase == Phase.TOP
    assert state.last_rep_timestamp == 0.0
    assert state.consecutive_reps == 0
    assert state.session_start_timestamp == 42.0


def test_random_signal_respects_debounce_and_monotonic_count():
    rng = random.Random(7)
    state = RepState()
    now = 0.0
    rep_times = []
    last_count = 0
    for _ in range(5000):
        now += rng.uniform(0.02, 0.4)
        metric = rng.choice([0, rng.randint(1, 180)])
        for event in update_rep_state(state, ExerciseKind.SQUAT, metric, now):
            if isinstance(event, RepCompleted):
                rep_times.append(event.timestamp)
        assert state.rep_count >= last_count
        last_count = state.rep_count

    assert len(rep_times) > 10
    gaps = [b - a for a, b in zip(rep_times, rep_times[1:])]
    assert min(gaps) >= DEBOUNCE_S


def test_parse_exercise_names():
    assert parse_exercise("squat") is ExerciseKind.SQUAT
    assert parse_exercise("Bicep_Curl") is ExerciseKind.BICEP_CURL
    assert parse_exercise(ExerciseKind.PUSHUP) is ExerciseKind.PUSHUP
    with pytest.raises(ValueError):
        parse_exercise("deadlift")
