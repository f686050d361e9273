# client/coaching.py

import logging
import random
from dataclasses import dataclass
from typing import Optional

from .rep_logic import ExerciseKind, Phase

log = logging.getLogger(__name__)

# Generic tips every 15-20 s
TIP_BASE_DELAY_S = 15.0
TIP_JITTER_S = 5.0


COACHING_TIPS = {
    ExerciseKind.SQUAT: [
        "Remember to keep your chest up and back straight!",
        "Push through your heels, not your toes!",
        "Go deep for maximum muscle engagement!",
        "Keep your core tight throughout the movement!",
        "You're building strong legs and glutes!",
    ],
    ExerciseKind.PUSHUP: [
        "Maintain a straight line from head to heels!",
        "Lower yourself with control for better results!",
        "Engage your core and glutes!",
        "Full range of motion builds more strength!",
        "You're building amazing upper body strength!",
    ],
    ExerciseKind.BICEP_CURL: [
        "Keep those elbows locked at your sides!",
        "Squeeze hard at the top of each rep!",
        "Control the weight on the way down!",
        "Focus on the muscle-mind connection!",
        "You're building impressive arm strength!",
    ],
    ExerciseKind.SHOULDER_PRESS: [
        "Press directly overhead, keep core tight!",
        "Control the descent for better muscle growth!",
        "Don't arch your back during the press!",
        "Full extension builds shoulder definition!",
        "You're building strong, capped shoulders!",
    ],
}

REP_MESSAGES = [
    "Excellent! {n} reps complete!",
    "Great work! That's {n}!",
    "Perfect form! {n} done!",
    "You're crushing it! {n} reps!",
    "Strong! {n} completed with great form!",
]

WELCOME_MESSAGES = {
    ExerciseKind.SQUAT: "Welcome! I'll coach you through squats. Remember to keep your back straight and go deep!",
    ExerciseKind.PUSHUP: "Welcome! Let's do push-ups. Keep your body straight and lower with control!",
    ExerciseKind.BICEP_CURL: "Welcome! Time for bicep curls. Keep elbows locked and squeeze at the top!",
    ExerciseKind.SHOULDER_PRESS: "Welcome! Shoulder press time. Press overhead and keep core tight!",
}
DEFAULT_WELCOME = "Welcome to AI Gym Coach! Let's get strong together!"

# On-screen text when the lower phase is reached
PHASE_FEEDBACK = {
    Phase.BOTTOM: "Perfect! Push back up powerfully",
    Phase.CONTRACTED: "Strong squeeze! Lower slowly",
}

# Squat depth below this is called out as too deep
SQUAT_TOO_DEEP = 70


def phase_remark(exercise: ExerciseKind, phase: Phase, metric: int) -> str:
    """Spoken remark when a lower phase is reached."""
    if exercise == ExerciseKind.SQUAT and phase == Phase.BOTTOM:
        if metric < SQUAT_TOO_DEEP:
            return "Too deep! Aim for 90 degrees"
        return "Perfect depth! Now drive up!"
    if exercise == ExerciseKind.PUSHUP and phase == Phase.BOTTOM:
        return "Perfect! Chest almost touching, now push up!"
    if exercise == ExerciseKind.BICEP_CURL and phase == Phase.CONTRACTED:
        return "Great contraction! Now lower with control!"
    return "Good form! Keep going!"


def rep_message(rep_count: int, rng: random.Random) -> str:
    return rng.choice(REP_MESSAGES).format(n=rep_count)


def welcome_message(exercise: ExerciseKind) -> str:
    return WELCOME_MESSAGES.get(exercise, DEFAULT_WELCOME)


@dataclass
class CoachingClock:
    last_tip_timestamp: float = 0.0
    next_tip_delay: float = TIP_BASE_DELAY_S


class CoachingScheduler:
    """
    Time-gated generic tips. Fires at most once per next_tip_delay
    (15 s plus up to 5 s of jitter, redrawn after every tip).
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.clock = CoachingClock()
        self.clock.next_tip_delay = self._draw_delay()

    def _draw_delay(self) -> float:
        return TIP_BASE_DELAY_S + self.rng.uniform(0, TIP_JITTER_S)

    def restart(self, now: float) -> None:
        self.clock.last_tip_timestamp = now
        self.clock.next_tip_delay = self._draw_delay()

    def maybe_tip(self, exercise: ExerciseKind, now: float) -> Optional[str]:
        if now - self.clock.last_tip_timestamp <= self.clock.next_tip_delay:
            return None
        tips = COACHING_TIPS.get(exercise)
        if not tips:
            return None

        tip = self.rng.choice(tips)
        self.clock.last_tip_timestamp = now
        self.clock.next_tip_delay = self._draw_delay()
        log.debug("tip fired for %s, next in %.1fs", exercise.value, self.clock.next_tip_delay)
        return tip
