# client/pose_estimator.py

import os
import time
from typing import Optional

os.environ['TF_CPP_MIN_LOG_LEVEL'] = '3'

import cv2
import mediapipe as mp

from .pose_utils import Frame, Joint

mp_pose = mp.solutions.pose


class PoseEstimator:
    def __init__(self):
        self.pose = mp_pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            smooth_landmarks=True,
            enable_segmentation=False,
            min_detection_confidence=0.5,
            min_tracking_confidence=0.5,
        )

    def process(self, frame_bgr, timestamp: Optional[float] = None) -> Optional[Frame]:
        """
        Input: BGR frame from OpenCV.
        Output: Frame with all 33 landmarks in normalized coordinates,
        or None if nobody is in view.
        """
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.pose.process(rgb)

        if not results.pose_landmarks:
            return None

        joints = [
            Joint(x=p.x, y=p.y, visibility=p.visibility)
            for p in results.pose_landmarks.landmark
        ]
        return Frame(joints=joints, timestamp=time.time() if timestamp is None else timestamp)

    def close(self):
        self.pose.close()
