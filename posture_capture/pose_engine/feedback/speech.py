# posture_capture/pose_engine/feedback/speech.py
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

class SpeechSink(ABC):
    """Speech collaborator. Each call is fire-and-forget."""

    @abstractmethod
    def speak(self, text: str) -> None: ...

class LoggingSpeechSink(SpeechSink):
    """Writes cues to the log; used when no synthesizer is wired in."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def speak(self, text: str) -> None:
        logger.log(self.level, "Voice feedback: %s", text)
