import logging
from abc import ABC, abstractmethod

import pyttsx3

from .exceptions import SynthesisFailure

log = logging.getLogger("speech")

class SpeechBackend(ABC):
    """
    Something that can say a piece of text out loud.
    speak() blocks until playback is finished and raises SynthesisFailure
    when it could not be done.
    """

    @abstractmethod
    def speak(self, text: str, volume: float) -> None:
        """
        Args:
            text: Already sanitized text.
            volume: Volume hint in the volume service's unit (0.0 - 1.0).
        """
        pass

class Pyttsx3Backend(SpeechBackend):
    """
    System speech through pyttsx3. A fresh engine is created for every
    utterance, the native drivers do not like being reused across threads.
    """

    def __init__(self, voice: str, speed: float = 1.0, base_rate: int = 200, base_volume: float = 1.0):
        self.voice = voice
        self.rate = int(base_rate * speed)
        self.base_volume = base_volume

    def _select_voice(self, engine) -> None:
        wanted = self.voice.lower()
        for v in engine.getProperty("voices"):
            if wanted in (v.name or "").lower() or wanted == (v.id or "").lower():
                engine.setProperty("voice", v.id)
                return
        log.warning(f"voice {self.voice!r} not found, using system default", extra={"event": "voice_missing"})

    def speak(self, text: str, volume: float) -> None:
        try:
            engine = pyttsx3.init()
            self._select_voice(engine)
            engine.setProperty("rate", self.rate)
            engine.setProperty("volume", max(0.0, min(1.0, volume * self.base_volume)))
            engine.say(text)
            engine.runAndWait()
            engine.stop()
        except Exception as e:
            raise SynthesisFailure(f"speech engine error: {e}") from e
