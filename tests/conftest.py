import math

import pytest

from gym_coach.client.pose_utils import (
    RIGHT_ANKLE,
    RIGHT_ELBOW,
    RIGHT_HIP,
    RIGHT_KNEE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    Frame,
    Joint,
)


def _limb(angle_deg, a_idx, b_idx, c_idx, visibility=1.0):
    """33 landmarks with a-b-c bent to angle_deg at b; everything else None."""
    joints = [None] * 33
    bx, by = 0.5, 0.5
    rad = math.radians(angle_deg)
    joints[a_idx] = Joint(bx, by - 0.2, visibility)
    joints[b_idx] = Joint(bx, by, visibility)
    joints[c_idx] = Joint(bx + 0.2 * math.sin(rad), by - 0.2 * math.cos(rad), visibility)
    return joints


@pytest.fixture
def knee_joints():
    def build(angle_deg, visibility=1.0):
        return _limb(angle_deg, RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE, visibility)
    return build


@pytest.fixture
def elbow_joints():
    def build(angle_deg, visibility=1.0):
        return _limb(angle_deg, RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST, visibility)
    return build


@pytest.fixture
def knee_frame(knee_joints):
    def build(angle_deg, timestamp=0.0):
        return Frame(joints=knee_joints(angle_deg), timestamp=timestamp)
    return build


class FakeSpeaker:
    def __init__(self):
        self.said = []
        self.busy = False
        self.stops = 0

    def say(self, text):
        if self.busy:
            return False
        self.said.append(text)
        return True

    def stop(self):
        self.stops += 1


@pytest.fixture
def speaker():
    return FakeSpeaker()
