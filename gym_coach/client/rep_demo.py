# client/rep_demo.py

import logging

import cv2

from . import settings
from .camera import CameraError, camera_error_message, open_camera
from .events import AnalysisCompleted, AnalysisFailed, FrameUpdate, Spoken, StatusChanged
from .feedback_gate import FeedbackGate, GenerationClient
from .pose_estimator import PoseEstimator
from .pose_utils import visible_connections, visible_joints
from .rep_logic import ExerciseKind
from .session import CoachSession
from .speech import Speaker

log = logging.getLogger(__name__)

WINDOW_TITLE = "AI Gym Coach"

# ---------- Exercise options ----------
EXERCISE_OPTIONS = {
    "1": ExerciseKind.SQUAT,
    "2": ExerciseKind.PUSHUP,
    "3": ExerciseKind.BICEP_CURL,
    "4": ExerciseKind.SHOULDER_PRESS,
}

SEVERITY_COLORS = {
    "good": (136, 255, 0),
    "warning": (0, 204, 255),
    "bad": (117, 45, 255),
    "": (200, 200, 200),
}


def choose_exercise() -> ExerciseKind:
    print("Select exercise to track:")
    print("  1. Squat")
    print("  2. Pushup")
    print("  3. Bicep Curl")
    print("  4. Shoulder Press")
    choice = input("Enter 1, 2, 3, or 4: ").strip()
    exercise = EXERCISE_OPTIONS.get(choice, ExerciseKind.SQUAT)
    print(f"\nYou selected: {exercise.value}\n")
    return exercise


class Overlay:
    """Presentation layer: keeps whatever the session last told it and draws it."""

    def __init__(self):
        self.update = None
        self.spoken = ""
        self.analysis = ""
        self.status = {}

    def on_event(self, event):
        if isinstance(event, FrameUpdate):
            self.update = event
        elif isinstance(event, Spoken):
            self.spoken = event.text
        elif isinstance(event, AnalysisCompleted):
            self.analysis = event.text.replace("\n", " ")
        elif isinstance(event, AnalysisFailed):
            self.analysis = ""
        elif isinstance(event, StatusChanged):
            self.status[event.channel] = (event.message, event.severity)

    def draw(self, frame, exercise: ExerciseKind):
        # mirror the image; landmarks are mirrored when drawn
        display = cv2.flip(frame, 1)
        h, w = display.shape[:2]
        upd = self.update

        if upd is not None and upd.joints:
            joints = upd.joints

            def px(idx):
                j = joints[idx]
                return int((1 - j.x) * w), int(j.y * h)

            for a, b in visible_connections(joints):
                cv2.line(display, px(a), px(b), (136, 255, 0), 3)
            for idx in visible_joints(joints):
                cv2.circle(display, px(idx), 4, (0, 0, 255), -1)

        cv2.putText(display, f"Exercise: {exercise.value}", (20, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, (200, 255, 200), 2)

        if upd is not None:
            metric = "--" if upd.metric is None else str(upd.metric)
            unit = "" if exercise == ExerciseKind.SHOULDER_PRESS else " deg"
            cv2.putText(display, f"Reps: {upd.rep_count}", (20, 60),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 255, 0), 2)
            cv2.putText(display, f"Angle: {metric}{unit}", (20, 90),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
            cv2.putText(display, upd.feedback, (20, 120),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, SEVERITY_COLORS.get(upd.feedback_severity, (200, 200, 200)), 2)
            cv2.putText(display, upd.tracking, (20, h - 90),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.55, SEVERITY_COLORS.get(upd.tracking_severity, (200, 200, 200)), 1)

        if "analysis" in self.status:
            message, severity = self.status["analysis"]
            cv2.putText(display, message, (20, h - 65),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.55, SEVERITY_COLORS.get(severity, (200, 200, 200)), 1)
        if self.analysis:
            cv2.putText(display, f"AI: {self.analysis[:90]}", (20, h - 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.45, (255, 204, 0), 1)
        if self.spoken:
            cv2.putText(display, f"Coach: {self.spoken}", (20, h - 15),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 200, 255), 1)
        return display


def build_session(exercise: ExerciseKind) -> CoachSession:
    gate = None
    if settings.analysis_configured():
        client = GenerationClient(
            settings.ANALYSIS_ENDPOINT,
            api_key=settings.GEMINI_API_KEY,
            timeout=settings.ANALYSIS_TIMEOUT,
        )
        gate = FeedbackGate(client)
    else:
        log.warning("no GEMINI_API_KEY / ANALYSIS_ENDPOINT set, AI analysis disabled")
    return CoachSession(exercise, speaker=Speaker(rate=settings.TTS_RATE), gate=gate)


def handle_key(session: CoachSession, key: int) -> None:
    if key == ord('r'):
        session.reset()
    elif key == ord('v'):
        session.toggle_voice()
    elif key == ord('a'):
        session.toggle_analysis()
    elif key == ord('t'):
        session.test_voice()
    elif chr(key) in EXERCISE_OPTIONS:
        session.switch_exercise(EXERCISE_OPTIONS[chr(key)])


def run(session: CoachSession, cap, overlay: Overlay) -> None:
    pose_estimator = PoseEstimator()
    session.start()
    print("Go! Tracking reps now. Keys: r=reset v=voice a=AI t=test 1-4=exercise q=quit")
    try:
        while session.active:
            ret, frame = cap.read()
            if not ret:
                log.error("camera stopped delivering frames")
                break

            pose_frame = pose_estimator.process(frame)
            session.process_frame(pose_frame)

            cv2.imshow(WINDOW_TITLE, overlay.draw(frame, session.exercise))
            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key != 0xFF:
                handle_key(session, key)
    finally:
        session.stop()
        pose_estimator.close()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s")

    session = build_session(choose_exercise())
    overlay = Overlay()
    session.subscribe(overlay.on_event)

    try:
        with open_camera(settings.CAMERA_INDEX) as cap:
            run(session, cap, overlay)
    except CameraError as e:
        log.error(camera_error_message(e))
    finally:
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
