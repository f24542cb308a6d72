import threading
from collections import deque
from typing import List, Optional

from .exceptions import QueueEmpty
from .models import Job

class JobQueue:
    """
    Unbounded FIFO of pending jobs shared by many producers and one consumer.
    Every operation holds the same lock, so concurrent callers observe a
    single total order of enqueue/remove calls.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: deque[Job] = deque()

    def enqueue(self, job: Job) -> int:
        """Append to the tail. Returns the queue length right after the append."""
        with self._lock:
            self._jobs.append(job)
            return len(self._jobs)

    def peek(self) -> Optional[Job]:
        with self._lock:
            return self._jobs[0] if self._jobs else None

    def remove_head(self) -> Job:
        with self._lock:
            if not self._jobs:
                raise QueueEmpty("job queue is empty")
            return self._jobs.popleft()

    def pop(self) -> Optional[Job]:
        """Atomic peek-and-remove; None when empty."""
        with self._lock:
            return self._jobs.popleft() if self._jobs else None

    def snapshot(self) -> List[Job]:
        with self._lock:
            return list(self._jobs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
