# client/speech.py

import logging
from threading import Lock, Thread
from typing import Callable, Optional

import pyttsx3

log = logging.getLogger(__name__)


class Speaker:
    """
    Single shared voice. A request made while something is being spoken is
    dropped, not queued: the first utterance wins until it finishes.
    """

    def __init__(self, rate: int = 165, engine_factory: Optional[Callable] = None):
        self.rate = rate
        self._engine_factory = engine_factory or pyttsx3.init
        self._lock = Lock()
        self._speaking = False
        self._thread: Optional[Thread] = None
        self._engine = None

    @property
    def is_speaking(self) -> bool:
        return self._speaking

    def say(self, text: str) -> bool:
        """Returns True if the utterance was started."""
        if not text:
            return False
        with self._lock:
            if self._speaking:
                log.debug("speech busy, dropped: %s", text)
                return False
            self._speaking = True

        self._thread = Thread(target=self._speak, args=(text,), name="tts", daemon=True)
        self._thread.start()
        return True

    def _speak(self, text: str) -> None:
        """
        Create a fresh pyttsx3 engine for THIS message only.
        Runs in its own thread so the camera loop never blocks.
        """
        try:
            engine = self._engine_factory()
            with self._lock:
                self._engine = engine
            engine.setProperty("rate", self.rate)
            engine.say(text)
            engine.runAndWait()
            engine.stop()
        except Exception as e:
            log.error("TTS error: %s", e)
        finally:
            with self._lock:
                self._engine = None
                self._speaking = False

    def stop(self) -> None:
        """Cuts off the utterance being spoken, if any."""
        with self._lock:
            engine = self._engine
        if engine is None:
            return
        try:
            engine.stop()
        except Exception as e:
            log.error("TTS stop error: %s", e)

    def wait(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
