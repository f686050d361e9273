# client/events.py
#
# Typed events emitted by the coaching core. The presentation layer
# subscribes to a CoachSession and renders whatever it receives.

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class RepCompleted:
    rep_count: int
    timestamp: float


@dataclass
class PhaseChanged:
    phase: str          # Phase value, e.g. "bottom"
    metric: int
    timestamp: float


@dataclass
class Spoken:
    """Echo of an utterance that actually reached the speech engine."""
    text: str
    source: str = "coach"   # "rep", "tip", "phase", "analysis", "coach"


@dataclass
class AnalysisStarted:
    rep_count: int


@dataclass
class AnalysisCompleted:
    text: str
    category: str
    spoken: str


@dataclass
class AnalysisFailed:
    reason: str


@dataclass
class StatusChanged:
    channel: str        # "camera", "analysis"
    message: str
    severity: str = "good"


@dataclass
class FrameUpdate:
    """Per-frame payload for the renderer."""
    metric: Optional[int]
    rep_count: int
    feedback: str
    feedback_severity: str
    tracking: str
    tracking_severity: str
    joints: list = field(default_factory=list)
