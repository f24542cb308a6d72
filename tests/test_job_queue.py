import threading

import pytest

from chatspeak.exceptions import QueueEmpty
from chatspeak.job_queue import JobQueue
from chatspeak.models import Job, VolumeInfo

INFO = VolumeInfo(volume=0.5, volume_percent=50, usage_count=1)

def make_job(user, text="hi"):
    return Job.create(user, text, INFO)

def test_fifo_order():
    q = JobQueue()
    jobs = [make_job(f"user{i}") for i in range(5)]
    for j in jobs:
        q.enqueue(j)
    assert [q.remove_head() for _ in range(5)] == jobs
    assert len(q) == 0

def test_enqueue_returns_length():
    q = JobQueue()
    assert q.enqueue(make_job("a")) == 1
    assert q.enqueue(make_job("b")) == 2

def test_peek_does_not_remove():
    q = JobQueue()
    assert q.peek() is None
    job = make_job("a")
    q.enqueue(job)
    assert q.peek() is job
    assert len(q) == 1

def test_remove_head_on_empty_raises():
    q = JobQueue()
    with pytest.raises(QueueEmpty):
        q.remove_head()
    assert q.pop() is None

def test_jobs_are_immutable():
    job = make_job("a")
    with pytest.raises(Exception):
        job.text = "changed"

def test_concurrent_producers_and_consumers_lose_nothing():
    q = JobQueue()
    per_producer = 200
    producers = 8
    taken = []
    taken_lock = threading.Lock()
    done = threading.Event()

    def produce(n):
        for i in range(per_producer):
            q.enqueue(make_job(f"p{n}", str(i)))

    def consume():
        while not (done.is_set() and len(q) == 0):
            job = q.pop()
            if job is not None:
                with taken_lock:
                    taken.append(job)

    consumers = [threading.Thread(target=consume) for _ in range(2)]
    for c in consumers:
        c.start()
    threads = [threading.Thread(target=produce, args=(n,)) for n in range(producers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    done.set()
    for c in consumers:
        c.join()

    assert len(taken) == per_producer * producers
    assert len({j.id for j in taken}) == len(taken)

def test_per_producer_order_is_preserved():
    q = JobQueue()

    def produce(n):
        for i in range(100):
            q.enqueue(make_job(f"p{n}", str(i)))

    threads = [threading.Thread(target=produce, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    seen = {}
    while len(q):
        job = q.remove_head()
        seen.setdefault(job.requester, []).append(int(job.text))
    for texts in seen.values():
        assert texts == list(range(100))
