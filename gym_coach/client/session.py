# client/session.py

import logging
import random
import time
from typing import Callable, List, Optional

from .coaching import (
    PHASE_FEEDBACK,
    CoachingScheduler,
    phase_remark,
    rep_message,
    welcome_message,
)
from .events import (
    AnalysisCompleted,
    AnalysisFailed,
    AnalysisStarted,
    FrameUpdate,
    PhaseChanged,
    RepCompleted,
    Spoken,
    StatusChanged,
)
from .feedback_gate import FeedbackGate, SessionSummary
from .pose_utils import Frame, compute_metric, has_height_signal
from .rep_logic import (
    ExerciseKind,
    Phase,
    RepState,
    parse_exercise,
    reset_rep_state,
    update_rep_state,
)
from .speech import Speaker

log = logging.getLogger(__name__)

# AI analysis every Nth rep
ANALYSIS_EVERY_N_REPS = 3

TRACKING_ACTIVE = "Body tracking active - AI coaching"
TRACKING_LOST = "Move into frame for AI coaching"
TRACKING_PARTIAL = "Move into frame so your joints are visible"


class CoachSession:
    """
    One workout session. Owns the rep state, the coaching clock and the
    feedback gate; nothing here outlives the session.

    Frames are fed in one at a time through process_frame(). Everything the
    UI needs is emitted to subscribers as typed events.
    """

    def __init__(
        self,
        exercise=ExerciseKind.SQUAT,
        speaker: Optional[Speaker] = None,
        gate: Optional[FeedbackGate] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.exercise = parse_exercise(exercise)
        self.speaker = speaker
        self.gate = gate
        self.rng = rng or random.Random()
        self.clock = clock

        self.rep_state = RepState()
        self.scheduler = CoachingScheduler(self.rng)

        self.active = False
        self.voice_enabled = True
        self.analysis_enabled = False
        self.latest_frame: Optional[Frame] = None

        self._feedback = ("Get into position", "good")
        self._listeners: List[Callable[[object], None]] = []

    # ---------- event plumbing ----------

    def subscribe(self, listener: Callable[[object], None]) -> None:
        self._listeners.append(listener)

    def _emit(self, event) -> None:
        for listener in self._listeners:
            listener(event)

    def _status(self, channel: str, message: str, severity: str = "good") -> None:
        self._emit(StatusChanged(channel=channel, message=message, severity=severity))

    def _set_feedback(self, message: str, severity: str = "good") -> None:
        self._feedback = (message, severity)
        self._status("feedback", message, severity)

    def _say(self, text: str, source: str = "coach") -> bool:
        if not self.voice_enabled or self.speaker is None:
            return False
        if not self.speaker.say(text):
            return False
        self._emit(Spoken(text=text, source=source))
        return True

    # ---------- lifecycle ----------

    def start(self, now: Optional[float] = None) -> None:
        now = self.clock() if now is None else now
        self.active = True
        self.rep_state.session_start_timestamp = now
        self.scheduler.restart(now)
        self._status("camera", "AI coach ready - begin workout!", "good")
        self._say(welcome_message(self.exercise))

        # analysis is on by default whenever a backend is configured
        if self.gate is not None and not self.analysis_enabled:
            self.toggle_analysis()

    def stop(self) -> None:
        if not self.active:
            return
        self.active = False
        self.analysis_enabled = False
        reps = self.rep_state.rep_count
        if reps > 0:
            self._say(
                f"Amazing workout! You completed {reps} reps with great form. "
                "You're getting stronger every day!"
            )
        self._status("camera", "Workout complete", "")
        self._status("tracking", "Great session! Ready for next workout", "good")
        self._set_feedback(f"Completed {reps} reps! Excellent work!", "good")
        log.info("session stopped after %d reps", reps)

    def reset(self, announce: bool = True) -> None:
        reset_rep_state(self.rep_state)
        self._set_feedback("Reps reset! Ready for new set!", "good")
        if announce and self.active:
            self._say("Reps reset! Let's start a new set with fresh energy!")

    def switch_exercise(self, exercise, announce: bool = True) -> None:
        self.exercise = parse_exercise(exercise)
        self.reset(announce=False)
        log.info("switched to %s", self.exercise.value)
        if announce:
            self._say(f"Switched to {self.exercise.value}. Let's do this!")

    def toggle_voice(self) -> bool:
        self.voice_enabled = not self.voice_enabled
        if self.voice_enabled:
            self._say("Voice coach activated! I'll guide you through every movement.")
        elif self.speaker is not None:
            self.speaker.stop()
        return self.voice_enabled

    def toggle_analysis(self) -> bool:
        if self.gate is None:
            self._status("analysis", "AI analysis unavailable - configure an API key or endpoint", "bad")
            return False
        self.analysis_enabled = not self.analysis_enabled
        if self.analysis_enabled:
            self._status("analysis", "AI analysis active - analyzing form", "good")
            self._say("AI analysis activated! I'll analyze your form and provide expert feedback.")
        else:
            self._status("analysis", "AI analysis paused", "")
        return self.analysis_enabled

    def test_voice(self) -> bool:
        return self._say(
            "This is your AI personal trainer! I provide real-time feedback. "
            "Let's make this an amazing workout!"
        )

    # ---------- per-frame processing ----------

    def summary(self, now: Optional[float] = None) -> SessionSummary:
        now = self.clock() if now is None else now
        state = self.rep_state
        return SessionSummary(
            exercise=self.exercise.value,
            total_reps=state.rep_count,
            phase=state.phase.value,
            consecutive_reps=state.consecutive_reps,
            duration_seconds=int(max(0.0, now - state.session_start_timestamp) + 0.5),
        )

    def poll_analysis(self) -> None:
        """Applies finished analysis calls. Runs on the frame thread."""
        if self.gate is None:
            return
        for event in self.gate.poll():
            self._emit(event)
            if isinstance(event, AnalysisCompleted):
                self._status("analysis", "AI analysis complete", "good")
                self._say(event.spoken, source="analysis")
            elif isinstance(event, AnalysisFailed):
                self._status("analysis", "AI analysis failed", "bad")

    def _request_analysis(self, now: float) -> None:
        if not self.analysis_enabled or self.gate is None or self.latest_frame is None:
            return
        if self.gate.request_analysis(self.summary(now), now):
            self._emit(AnalysisStarted(rep_count=self.rep_state.rep_count))
            self._status("analysis", "Analyzing form with AI...", "warning")

    def _on_rep(self, event: RepCompleted, now: float) -> None:
        self._set_feedback(f"Perfect rep #{event.rep_count}!", "good")
        self._emit(event)
        self._say(rep_message(event.rep_count, self.rng), source="rep")
        if event.rep_count % ANALYSIS_EVERY_N_REPS == 0:
            self._request_analysis(now)

    def _on_phase(self, event: PhaseChanged) -> None:
        phase = Phase(event.phase)
        self._set_feedback(PHASE_FEEDBACK.get(phase, "Good form! Keep going!"), "good")
        self._emit(event)
        self._say(phase_remark(self.exercise, phase, event.metric), source="phase")

    def process_frame(self, frame: Optional[Frame], now: Optional[float] = None) -> FrameUpdate:
        now = self.clock() if now is None else now
        self.poll_analysis()

        if not self.active:
            return self._frame_update(None, "Session stopped", "warning", [])

        if frame is None or not frame.joints:
            self._feedback = ("Step into camera view to begin workout", "warning")
            return self._frame_update(None, TRACKING_LOST, "warning", [])

        self.latest_frame = frame
        metric = compute_metric(self.exercise, frame.joints)
        if metric == 0 and not has_height_signal(self.exercise, frame.joints):
            # no signal this tick: skip reps and coaching
            return self._frame_update(None, TRACKING_PARTIAL, "warning", frame.joints)

        for event in update_rep_state(self.rep_state, self.exercise, metric, now):
            if isinstance(event, RepCompleted):
                self._on_rep(event, now)
            elif isinstance(event, PhaseChanged):
                self._on_phase(event)

        if self.voice_enabled:
            tip = self.scheduler.maybe_tip(self.exercise, now)
            if tip:
                self._say(tip, source="tip")

        return self._frame_update(metric, TRACKING_ACTIVE, "good", frame.joints)

    def _frame_update(self, metric, tracking: str, tracking_severity: str, joints) -> FrameUpdate:
        feedback, severity = self._feedback
        update = FrameUpdate(
            metric=metric,
            rep_count=self.rep_state.rep_count,
            feedback=feedback,
            feedback_severity=severity,
            tracking=tracking,
            tracking_severity=tracking_severity,
            joints=list(joints),
        )
        self._emit(update)
        return update
