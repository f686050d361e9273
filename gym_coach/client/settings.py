# client/settings.py

import os

import dotenv

dotenv.load_dotenv()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")

# Point this at the backend proxy (e.g. http://127.0.0.1:8000/v1/generate)
# to keep the key server-side.
ANALYSIS_ENDPOINT = os.getenv(
    "ANALYSIS_ENDPOINT",
    f"https://generativelanguage.googleapis.com/v1beta/models/{GEMINI_MODEL}:generateContent",
)
# Unset means no client-side timeout
ANALYSIS_TIMEOUT = float(os.getenv("ANALYSIS_TIMEOUT")) if os.getenv("ANALYSIS_TIMEOUT") else None

CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
TTS_RATE = int(os.getenv("TTS_RATE", "165"))


def analysis_configured() -> bool:
    """Direct Gemini calls need a key; a custom endpoint is assumed to handle auth."""
    if GEMINI_API_KEY:
        return True
    return "generativelanguage.googleapis.com" not in ANALYSIS_ENDPOINT
