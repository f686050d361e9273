import pytest

pytest.importorskip("cv2")

from gym_coach.client import camera  # noqa: E402
from gym_coach.client.camera import (  # noqa: E402
    CameraNotFound,
    CameraPermissionDenied,
    camera_error_message,
    open_camera,
)


class FakeCapture:
    instances = []

    def __init__(self, index, opened=True, readable=True):
        self.index = index
        self.opened = opened
        self.readable = readable
        self.released = False
        self.props = {}
        FakeCapture.instances.append(self)

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.props[prop] = value

    def read(self):
        return self.readable, None

    def release(self):
        self.released = True


@pytest.fixture
def fake_capture(monkeypatch):
    FakeCapture.instances = []

    def install(**kwargs):
        monkeypatch.setattr(camera.cv2, "VideoCapture", lambda index: FakeCapture(index, **kwargs))
        return FakeCapture.instances
    return install


def test_camera_released_after_session(fake_capture):
    instances = fake_capture()
    with open_camera(2) as cap:
        assert cap.index == 2
        assert not cap.released
    assert instances[0].released


def test_camera_released_when_loop_raises(fake_capture):
    instances = fake_capture()
    with pytest.raises(RuntimeError):
        with open_camera():
            raise RuntimeError("pose model crashed")
    assert instances[0].released


def test_missing_camera(fake_capture):
    instances = fake_capture(opened=False)
    with pytest.raises(CameraNotFound) as exc:
        with open_camera():
            pass
    assert instances[0].released
    assert "No camera found" in camera_error_message(exc.value)


def test_camera_without_permission(fake_capture):
    instances = fake_capture(readable=False)
    with pytest.raises(CameraPermissionDenied) as exc:
        with open_camera():
            pass
    assert instances[0].released
    assert "allow camera access" in camera_error_message(exc.value)


def test_unknown_camera_error_message():
    assert camera_error_message(OSError("busy")) == "Camera access denied. Error: busy"
