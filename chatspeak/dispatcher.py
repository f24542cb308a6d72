import logging
import threading
from typing import Optional

from .chat import Notifier, notify_quietly
from .job_queue import JobQueue
from .logging_utils import job_fields
from .models import DispatchState, Job
from .speech import SpeechBackend

log = logging.getLogger("dispatcher")

class Dispatcher:
    """
    Single consumer of a JobQueue. Every poll interval, if nothing is being
    spoken, the head job is taken off the queue and spoken to completion.
    At most one job is in flight; a finished job is never requeued.
    """

    def __init__(
        self,
        queue: JobQueue,
        speaker: SpeechBackend,
        notifier: Notifier,
        poll_interval: float = 1.0,
    ):
        self.queue = queue
        self.speaker = speaker
        self.notifier = notifier
        self.poll_interval = poll_interval

        self._state = DispatchState.idle
        self._in_flight: Optional[Job] = None
        self._tick_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def in_flight(self) -> Optional[Job]:
        return self._in_flight

    def tick(self) -> bool:
        """One polling step. Returns True if a job was attempted."""
        if not self._tick_lock.acquire(blocking=False):
            return False
        try:
            if self._state is DispatchState.speaking:
                return False
            job = self.queue.pop()
            if job is None:
                return False

            self._in_flight = job
            self._state = DispatchState.speaking
            try:
                self.handle_job(job)
            finally:
                self._in_flight = None
                self._state = DispatchState.idle
            return True
        finally:
            self._tick_lock.release()

    def handle_job(self, job: Job) -> None:
        log.info(
            f"speaking {job.text!r}",
            extra=job_fields(job, event="job_started", state=DispatchState.speaking.value, queue_length=len(self.queue)),
        )
        try:
            self.speaker.speak(job.text, job.volume)
        except Exception as e:
            log.error(f"job failed: {e}", extra=job_fields(job, event="job_failed"), exc_info=True)
            notify_quietly(self.notifier, f"❌ TTS Error for @{job.requester}")
            return

        log.info("job spoken", extra=job_fields(job, event="job_spoken"))
        notify_quietly(self.notifier, f'🎤 "{job.text}" ({job.volume_percent}% vol)')

    def run(self) -> None:
        log.info("dispatcher started", extra={"event": "dispatcher_start"})
        while not self._stop.wait(self.poll_interval):
            try:
                self.tick()
            except Exception:
                log.error("dispatcher loop error", extra={"event": "dispatcher_loop_error"}, exc_info=True)
        log.info("dispatcher stopped", extra={"event": "dispatcher_stop"})

    def start(self) -> None:
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="dispatcher", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stops polling. A job that is being spoken is allowed to finish."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
