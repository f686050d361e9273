# client/rep_logic.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from .events import PhaseChanged, RepCompleted

# Minimum time between two accepted transitions (seconds)
DEBOUNCE_S = 1.0


class ExerciseKind(str, Enum):
    SQUAT = "squat"
    PUSHUP = "pushup"
    BICEP_CURL = "bicep"
    SHOULDER_PRESS = "shoulder"


class Phase(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    CONTRACTED = "contracted"


@dataclass(frozen=True)
class ExerciseConfig:
    """
    Thresholds for one exercise.

    Angle-based exercises set min_angle/max_angle (degrees); height-based
    exercises set min_height/max_height (0..100) and only display the metric.
    """
    min_angle: Optional[float] = None
    max_angle: Optional[float] = None
    min_height: Optional[float] = None
    max_height: Optional[float] = None

    def __post_init__(self):
        if self.min_angle is not None or self.max_angle is not None:
            if self.min_angle is None or self.max_angle is None or self.min_angle >= self.max_angle:
                raise ValueError(f"min_angle must be below max_angle: {self}")
        if self.min_height is not None or self.max_height is not None:
            if self.min_height is None or self.max_height is None or self.min_height >= self.max_height:
                raise ValueError(f"min_height must be below max_height: {self}")

    @property
    def metric_only(self) -> bool:
        return self.min_angle is None


# ----------------- Per-exercise configuration -----------------
EXERCISE_CONFIG: Dict[ExerciseKind, ExerciseConfig] = {
    ExerciseKind.SQUAT: ExerciseConfig(min_angle=80, max_angle=170),
    ExerciseKind.PUSHUP: ExerciseConfig(min_angle=80, max_angle=160),
    ExerciseKind.BICEP_CURL: ExerciseConfig(min_angle=30, max_angle=160),
    # shoulder press has no rep rule yet, the height is display-only
    ExerciseKind.SHOULDER_PRESS: ExerciseConfig(min_height=30, max_height=70),
}

# Phase entered when the metric drops below min_angle
LOWER_PHASE = {
    ExerciseKind.SQUAT: Phase.BOTTOM,
    ExerciseKind.PUSHUP: Phase.BOTTOM,
    ExerciseKind.BICEP_CURL: Phase.CONTRACTED,
}


def parse_exercise(name: Union[str, ExerciseKind]) -> ExerciseKind:
    if isinstance(name, ExerciseKind):
        return name
    key = (name or "").strip().lower()
    aliases = {
        "squats": ExerciseKind.SQUAT,
        "push-up": ExerciseKind.PUSHUP,
        "pushups": ExerciseKind.PUSHUP,
        "bicep_curl": ExerciseKind.BICEP_CURL,
        "curl": ExerciseKind.BICEP_CURL,
        "shoulder_press": ExerciseKind.SHOULDER_PRESS,
    }
    if key in aliases:
        return aliases[key]
    return ExerciseKind(key)


def get_exercise_config(exercise: ExerciseKind) -> ExerciseConfig:
    return EXERCISE_CONFIG[exercise]


@dataclass
class RepState:
    rep_count: int = 0
    phase: Phase = Phase.TOP
    last_angle: int = 0
    last_rep_timestamp: float = 0.0
    consecutive_reps: int = 0
    session_start_timestamp: float = 0.0


def reset_rep_state(state: RepState) -> None:
    """Back to a fresh set. The session start time is kept."""
    state.rep_count = 0
    state.phase = Phase.TOP
    state.last_rep_timestamp = 0.0
    state.consecutive_reps = 0


# -------------------------------------------------------------
# Main update function
# -------------------------------------------------------------

def update_rep_state(
    state: RepState,
    exercise: ExerciseKind,
    metric: int,
    now: float,
) -> List[object]:
    """
    Feeds one frame's metric into the repetition state machine.

    - metric 0 is "no signal" and never moves the machine.
    - Any transition inside DEBOUNCE_S of the last completed rep is ignored.
    - TOP -> BOTTOM/CONTRACTED when metric < min_angle,
      back to TOP when metric > max_angle, which completes a rep.
    - Between min_angle and max_angle nothing happens.

    Returns the events produced by this frame (PhaseChanged / RepCompleted).
    """
    if not metric:
        return []

    state.last_angle = metric
    cfg = get_exercise_config(exercise)
    lower = LOWER_PHASE.get(exercise)
    if cfg.metric_only or lower is None:
        return []

    if now - state.last_rep_timestamp < DEBOUNCE_S:
        return []

    if state.phase == Phase.TOP and metric < cfg.min_angle:
        state.phase = lower
        return [PhaseChanged(phase=lower.value, metric=metric, timestamp=now)]

    if state.phase == lower and metric > cfg.max_angle:
        state.rep_count += 1
        state.phase = Phase.TOP
        state.last_rep_timestamp = now
        state.consecutive_reps += 1
        return [RepCompleted(rep_count=state.rep_count, timestamp=now)]

    return []
