"""Real-time rep counting and voice coaching from webcam pose estimates."""

__version__ = "0.1.0"
