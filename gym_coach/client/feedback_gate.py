# client/feedback_gate.py

import logging
import time
from dataclasses import dataclass
from enum import Enum
from queue import Empty, Queue
from threading import Thread
from typing import List, Optional

import requests

from .events import AnalysisCompleted, AnalysisFailed

log = logging.getLogger(__name__)

# Minimum time between two accepted analysis calls (seconds)
ANALYSIS_COOLDOWN_S = 10.0


class AnalysisError(Exception):
    """The text-generation call failed or returned nothing usable."""


class FeedbackCategory(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_WORK = "needs_work"
    GENERIC = "generic"


SPOKEN_FEEDBACK = {
    FeedbackCategory.EXCELLENT: "AI Analysis: Your form is excellent! Keep up the great work!",
    FeedbackCategory.GOOD: "AI Analysis: Good form! Minor adjustments needed for perfection.",
    FeedbackCategory.NEEDS_WORK: "AI Analysis: Some adjustments needed. Focus on proper form.",
    FeedbackCategory.GENERIC: "AI Analysis: Keep working on your form for better results!",
}

# Checked in order, first hit wins. Matching ignores case.
CATEGORY_KEYWORDS = [
    (FeedbackCategory.EXCELLENT, ("Excellent", "Perfect")),
    (FeedbackCategory.GOOD, ("Good", "Well")),
    (FeedbackCategory.NEEDS_WORK, ("Improve", "Adjust")),
]


def classify_response(text: str) -> FeedbackCategory:
    """
    Capitalised keywords decide first, in priority order. Only when none of
    them appear is the text matched again ignoring case.
    """
    for category, keywords in CATEGORY_KEYWORDS:
        if any(word in text for word in keywords):
            return category
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(word.lower() in lowered for word in keywords):
            return category
    return FeedbackCategory.GENERIC


@dataclass
class SessionSummary:
    exercise: str
    total_reps: int
    phase: str
    consecutive_reps: int
    duration_seconds: int


PROMPT_TEMPLATE = (
    "As a professional fitness coach, analyze this workout session and provide "
    "brief, actionable feedback:\n\n"
    "Exercise: {exercise}\n"
    "Total Reps: {total_reps}\n"
    "Current State: {phase}\n"
    "Consecutive Reps: {consecutive_reps}\n"
    "Workout Duration: {duration_seconds} seconds\n\n"
    "Provide 2-3 sentences of encouraging, professional feedback focusing on "
    "form and motivation."
)


def build_prompt(summary: SessionSummary) -> str:
    return PROMPT_TEMPLATE.format(
        exercise=summary.exercise,
        total_reps=summary.total_reps,
        phase=summary.phase,
        consecutive_reps=summary.consecutive_reps,
        duration_seconds=summary.duration_seconds,
    )


class GenerationClient:
    """
    Minimal generateContent client. Works against the Gemini REST API or
    the bundled backend proxy, which speaks the same envelope.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: int = 150,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._http = session or requests.Session()

    def build_payload(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    def generate(self, prompt: str) -> str:
        params = {"key": self.api_key} if self.api_key else None
        try:
            resp = self._http.post(
                self.endpoint,
                params=params,
                json=self.build_payload(prompt),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AnalysisError(f"request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise AnalysisError(f"API request failed: {resp.status_code}")

        try:
            data = resp.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AnalysisError(f"malformed response: {e}") from e

        if not isinstance(text, str) or not text.strip():
            raise AnalysisError("empty response")
        return text


@dataclass
class FeedbackGateState:
    last_call_timestamp: float = 0.0
    in_flight: bool = False


class FeedbackGate:
    """
    At most one analysis call in flight, and at most one accepted call per
    cooldown. The HTTP call runs on a background thread; its result is
    parked on a queue and only applied when the frame loop calls poll().
    """

    def __init__(self, client: GenerationClient, cooldown: float = ANALYSIS_COOLDOWN_S):
        self.client = client
        self.cooldown = cooldown
        self.state = FeedbackGateState()
        self._results: Queue = Queue()

    def request_analysis(self, summary: SessionSummary, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        if self.state.in_flight:
            log.debug("analysis skipped: call already in flight")
            return False
        if now - self.state.last_call_timestamp < self.cooldown:
            log.debug("analysis skipped: cooling down")
            return False

        self.state.in_flight = True
        self.state.last_call_timestamp = now
        prompt = build_prompt(summary)

        Thread(target=self._worker, args=(prompt,), name="analysis-call", daemon=True).start()
        return True

    def _worker(self, prompt: str) -> None:
        try:
            text = self.client.generate(prompt)
        except AnalysisError as e:
            log.warning("analysis failed: %s", e)
            self._results.put(AnalysisFailed(reason=str(e)))
            return
        except Exception as e:
            log.exception("analysis call crashed")
            self._results.put(AnalysisFailed(reason=str(e) or type(e).__name__))
            return
        category = classify_response(text)
        self._results.put(
            AnalysisCompleted(text=text, category=category.value, spoken=SPOKEN_FEEDBACK[category])
        )

    def poll(self, timeout: Optional[float] = None) -> List[object]:
        """
        Drains finished calls and clears the in-flight flag for each.
        With a timeout, waits up to that long for the first result.
        """
        events = []
        if timeout is not None:
            try:
                events.append(self._results.get(timeout=timeout))
            except Empty:
                return events
        while True:
            try:
                events.append(self._results.get_nowait())
            except Empty:
                break
        if events:
            self.state.in_flight = False
        return events
