# client/pose_utils.py

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from .rep_logic import ExerciseKind

# mediapipe pose topology (33 landmarks); only these are consulted
RIGHT_SHOULDER = 12
RIGHT_ELBOW = 14
RIGHT_WRIST = 16
RIGHT_HIP = 24
RIGHT_KNEE = 26
RIGHT_ANKLE = 28

VISIBILITY_THRESHOLD = 0.5

SKELETON_CONNECTIONS = [
    (11, 12), (11, 13), (13, 15), (12, 14), (14, 16),
    (11, 23), (12, 24), (23, 24), (23, 25), (24, 26),
    (25, 27), (26, 28),
]
KEY_POINTS = [11, 12, 13, 14, 15, 16, 23, 24, 25, 26, 27, 28]


@dataclass
class Joint:
    x: float
    y: float
    visibility: float = 1.0


@dataclass
class Frame:
    """One pose snapshot: joints in normalized [0, 1] frame coordinates."""
    joints: List[Optional[Joint]] = field(default_factory=list)
    timestamp: float = 0.0


def _joint(joints: Sequence[Optional[Joint]], idx: int) -> Optional[Joint]:
    if joints is None or idx >= len(joints):
        return None
    return joints[idx]


def angle_between(a: Joint, b: Joint, c: Joint) -> int:
    """
    Returns the angle (in whole degrees) at point b formed by points a-b-c.
    0 when either arm of the angle has zero length.
    """
    ba = np.array([a.x - b.x, a.y - b.y], dtype=float)
    bc = np.array([c.x - b.x, c.y - b.y], dtype=float)

    norm_ba = np.linalg.norm(ba)
    norm_bc = np.linalg.norm(bc)
    if norm_ba == 0 or norm_bc == 0:
        return 0

    cosang = np.clip(np.dot(ba, bc) / (norm_ba * norm_bc), -1.0, 1.0)
    angle = np.degrees(np.arccos(cosang))
    return int(np.floor(angle + 0.5))


def _triple_angle(joints, a_idx: int, b_idx: int, c_idx: int) -> int:
    a, b, c = _joint(joints, a_idx), _joint(joints, b_idx), _joint(joints, c_idx)
    if a is None or b is None or c is None:
        return 0
    return angle_between(a, b, c)


def knee_angle(joints) -> int:
    return _triple_angle(joints, RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE)


def elbow_angle(joints) -> int:
    return _triple_angle(joints, RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST)


def shoulder_height(joints) -> int:
    """Wrist height above the shoulder, scaled to 0..100 (image y grows downward)."""
    shoulder = _joint(joints, RIGHT_SHOULDER)
    wrist = _joint(joints, RIGHT_WRIST)
    if shoulder is None or wrist is None:
        return 0
    height = int(np.floor((shoulder.y - wrist.y) * 100 + 0.5))
    return max(0, min(100, height))


def has_height_signal(exercise: ExerciseKind, joints: Sequence[Optional[Joint]]) -> bool:
    """True when a height-based exercise sees both joints, so a 0 height is a real reading."""
    if exercise != ExerciseKind.SHOULDER_PRESS:
        return False
    return _joint(joints, RIGHT_SHOULDER) is not None and _joint(joints, RIGHT_WRIST) is not None


def compute_metric(exercise: ExerciseKind, joints: Sequence[Optional[Joint]]) -> int:
    """
    Single scalar for the active exercise: an angle in degrees, or a
    normalized height for height-based exercises. 0 means "no signal".
    """
    if exercise == ExerciseKind.SQUAT:
        return knee_angle(joints)
    if exercise == ExerciseKind.SHOULDER_PRESS:
        return shoulder_height(joints)
    # pushup, bicep curl
    return elbow_angle(joints)


def visible_joints(joints: Sequence[Optional[Joint]], threshold: float = VISIBILITY_THRESHOLD):
    """Indices of key points that may be drawn on the overlay."""
    return [
        idx for idx in KEY_POINTS
        if _joint(joints, idx) is not None and joints[idx].visibility > threshold
    ]


def visible_connections(joints: Sequence[Optional[Joint]], threshold: float = VISIBILITY_THRESHOLD):
    shown = set(visible_joints(joints, threshold))
    return [(a, b) for a, b in SKELETON_CONNECTIONS if a in shown and b in shown]
