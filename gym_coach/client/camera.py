# client/camera.py

import logging
from contextlib import contextmanager

import cv2

log = logging.getLogger(__name__)


class CameraError(Exception):
    remedy = "Check the camera connection and try again."

    def user_message(self) -> str:
        detail = str(self)
        msg = "Camera access denied. " + self.remedy
        if detail:
            msg += f" ({detail})"
        return msg


class CameraPermissionDenied(CameraError):
    remedy = "Please allow camera access for this application."


class CameraNotFound(CameraError):
    remedy = "No camera found on your device."


def camera_error_message(error: Exception) -> str:
    if isinstance(error, CameraError):
        return error.user_message()
    return f"Camera access denied. Error: {error}"


@contextmanager
def open_camera(index: int = 0, width: int = 640, height: int = 480):
    """
    Acquires the webcam for the duration of a session. The device is
    released on every exit path.
    """
    cap = cv2.VideoCapture(index)
    try:
        if not cap.isOpened():
            raise CameraNotFound(f"could not open camera {index}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        # Some backends open the device but refuse frames without permission
        ok, _ = cap.read()
        if not ok:
            raise CameraPermissionDenied(f"camera {index} returned no frames")

        log.info("camera %d opened", index)
        yield cap
    finally:
        cap.release()
        log.info("camera %d released", index)
