import threading
import time

import pytest

from chatspeak.bot import SpeechBot
from chatspeak.exceptions import ResolverFailure, SynthesisFailure
from chatspeak.models import VolumeInfo

class FakeResolver:
    def __init__(self, info=None, fail=False):
        self.info = info or VolumeInfo(volume=0.3, volume_percent=30, usage_count=5)
        self.fail = fail
        self.calls = []

    def resolve_volume(self, user):
        self.calls.append(user)
        if self.fail:
            raise ResolverFailure("API responded with 500")
        return self.info

    def volume_text(self, user):
        if self.fail:
            raise ResolverFailure("down")
        return f"@{user} your TTS volume is {self.info.volume_percent}%"

    def stats_text(self):
        if self.fail:
            raise ResolverFailure("down")
        return "TTS stats: 3 users, 12 messages"

    def close(self):
        pass

class FakeSpeaker:
    """Records speaking windows and whether two ever overlapped."""

    def __init__(self, duration=0.0, fail_on=()):
        self.duration = duration
        self.fail_on = set(fail_on)
        self.spoken = []
        self.windows = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def speak(self, text, volume):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        start = time.monotonic()
        try:
            if self.duration:
                time.sleep(self.duration)
            self.spoken.append(text)
            if text in self.fail_on:
                raise SynthesisFailure(f"could not say {text!r}")
        finally:
            with self._lock:
                self.active -= 1
            self.windows.append((start, time.monotonic()))

class FakeChat:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.connected = True

    def notify(self, text):
        if self.fail:
            raise OSError("chat write failed")
        self.sent.append(text)

@pytest.fixture
def resolver():
    return FakeResolver()

@pytest.fixture
def speaker():
    return FakeSpeaker()

@pytest.fixture
def chat():
    return FakeChat()

@pytest.fixture
def bot(resolver, speaker, chat):
    return SpeechBot(resolver=resolver, speaker=speaker, notifier=chat, bot_username="ttsbot")
