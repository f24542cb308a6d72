import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .chat import Notifier, TwitchChat, notify_quietly
from .commands import classify
from .dispatcher import Dispatcher
from .exceptions import ResolverFailure
from .job_queue import JobQueue
from .logging_utils import job_fields
from .models import ChatEvent, Command, Job
from .resolver import VolumeResolver
from .sanitizer import sanitize
from .settings import Settings
from .speech import Pyttsx3Backend, SpeechBackend

log = logging.getLogger("bot")

HELP_TEXT = "🎤 TTS Commands: !tts <message> | !volume | Volume increases 2% per TTS use!"
ONLINE_TEXT = "🤖 TTS Bot is online! Use !tts <message> to test."

class SpeechBot:
    """
    Routes chat commands. TTS requests are sanitized, tagged with the requester's volume
    from the volume service and queued; the dispatcher speaks them one at a time.
    """

    def __init__(
        self,
        resolver: VolumeResolver,
        speaker: SpeechBackend,
        notifier: Optional[Notifier] = None,
        bot_username: Optional[str] = None,
        max_message_length: int = 200,
        poll_interval: float = 1.0,
        handler_workers: int = 4,
    ):
        self.resolver = resolver
        self.notifier = notifier
        self.bot_username = bot_username
        self.max_message_length = max_message_length
        self.queue = JobQueue()
        self.dispatcher = Dispatcher(self.queue, speaker, self, poll_interval=poll_interval)
        self._handler_workers = handler_workers
        self._pool: Optional[ThreadPoolExecutor] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpeechBot":
        bot = cls(
            resolver=VolumeResolver(settings.volume_api_url, timeout=settings.resolver_timeout_seconds),
            speaker=Pyttsx3Backend(
                voice=settings.tts_voice,
                speed=settings.tts_speed,
                base_rate=settings.tts_base_rate,
                base_volume=settings.base_volume,
            ),
            bot_username=settings.twitch_username,
            max_message_length=settings.max_message_length,
            poll_interval=settings.poll_interval_seconds,
            handler_workers=settings.handler_workers,
        )
        bot.notifier = TwitchChat(
            username=settings.twitch_username,
            oauth_token=settings.twitch_oauth_token,
            channel=settings.twitch_channel,
            on_message=bot.submit,
            on_connect=bot.announce,
            url=settings.twitch_ws_url,
            reconnect_seconds=settings.chat_reconnect_seconds,
        )
        return bot

    # all outbound chat goes through here; dropped while no chat is attached
    def notify(self, text: str) -> None:
        if self.notifier is None:
            log.info("no chat attached, message dropped", extra={"event": "notify_dropped"})
            return
        self.notifier.notify(text)

    def say(self, text: str) -> None:
        notify_quietly(self, text)

    def announce(self) -> None:
        self.say(ONLINE_TEXT)

    @property
    def chat_connected(self) -> bool:
        return bool(getattr(self.notifier, "connected", False))

    def submit(self, event: ChatEvent) -> Future:
        """Handle an inbound chat event on the handler pool."""
        if self._pool is None:
            raise RuntimeError("bot is not started")
        return self._pool.submit(self._handle_safely, event)

    def _handle_safely(self, event: ChatEvent) -> None:
        try:
            self.handle_event(event)
        except Exception:
            log.error("chat event handler failed", extra={"user": event.speaker, "event": "handler_error"}, exc_info=True)

    def handle_event(self, event: ChatEvent) -> Optional[Job]:
        """Returns the queued job for accepted TTS requests, None otherwise."""
        parsed = classify(event, self.bot_username)
        user = event.speaker

        if parsed.kind is Command.tts:
            return self.request_tts(user, parsed.payload or "")
        if parsed.kind is Command.volume:
            self.show_volume(user)
        elif parsed.kind is Command.help:
            self.say(HELP_TEXT)
        elif parsed.kind is Command.stats:
            self.show_stats()
        return None

    def request_tts(self, user: str, message: str) -> Optional[Job]:
        log.info(f"tts request from {user}: {message!r}", extra={"user": user, "event": "tts_request"})
        try:
            info = self.resolver.resolve_volume(user)
        except ResolverFailure as e:
            log.warning(f"volume lookup failed: {e}", extra={"user": user, "event": "resolver_failed"})
            self.say(f"@{user} Sorry, TTS system error. Is the API running?")
            return None

        job = Job.create(user, sanitize(message, self.max_message_length), info)
        position = self.queue.enqueue(job)
        log.info(
            f"job queued at position {position}",
            extra=job_fields(job, event="job_queued", queue_length=position),
        )
        self.say(f"🔊 @{user} TTS queued at {job.volume_percent}% volume! (Queue: {position})")
        return job

    def show_volume(self, user: str) -> None:
        try:
            self.say(self.resolver.volume_text(user))
        except ResolverFailure:
            log.warning("volume text lookup failed", extra={"user": user, "event": "resolver_failed"}, exc_info=True)
            self.say(f"@{user} Couldn't get volume info. API might be down.")

    def show_stats(self) -> None:
        try:
            self.say(self.resolver.stats_text())
        except ResolverFailure:
            log.warning("stats lookup failed", extra={"event": "resolver_failed"}, exc_info=True)
            self.say("Stats unavailable - API might be down.")

    def start(self) -> None:
        self._pool = ThreadPoolExecutor(max_workers=self._handler_workers, thread_name_prefix="chat-handler")
        self.dispatcher.start()
        if self.notifier is not None and hasattr(self.notifier, "start"):
            self.notifier.start()

    def stop(self) -> None:
        if self.notifier is not None and hasattr(self.notifier, "stop"):
            self.notifier.stop()
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None
        self.dispatcher.stop()
        self.resolver.close()
