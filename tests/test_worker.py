import threading

import pytest
import redis

from taskqueue_service.storage import TaskNotFoundError, TaskStore
from taskqueue_service.worker import (
    QUEUE_KEY,
    ProcessingCancelled,
    decode_task_id,
    process_task,
    worker,
)


@pytest.fixture
def store(tmp_path):
    with TaskStore(str(tmp_path / "tasks.sqlite")) as task_store:
        yield task_store


class ScriptedRedis:
    """Hands out scripted BLPOP results and sets the stop event on the last one."""

    def __init__(self, steps, stop_event):
        self.steps = list(steps)
        self.stop_event = stop_event
        self.calls = []

    def blpop(self, keys, timeout=0):
        self.calls.append((keys, timeout))
        step = self.steps.pop(0) if self.steps else None
        if not self.steps:
            self.stop_event.set()
        if isinstance(step, Exception):
            raise step
        return step


@pytest.mark.parametrize(
    "payload, expected",
    [
        (b"7", 7),
        ("12", 12),
        (b"-3", 0),
        (b"abc", 0),
        (b"1.5", 0),
        (b"true", 0),
        (b'"5"', 0),
    ],
)
def test_decode_task_id(payload, expected):
    assert decode_task_id(payload) == expected


def test_process_task_reaches_approved(store):
    task = store.create("t", "")
    process_task(store, task.id, None, (0, 0))
    stored = store.get(task.id)
    assert stored.status == "approved"
    assert stored.attempts == 3


def test_process_task_stops_when_cancelled(store):
    task = store.create("t", "")
    stop = threading.Event()
    stop.set()
    with pytest.raises(ProcessingCancelled):
        process_task(store, task.id, stop, (0, 0))
    stored = store.get(task.id)
    assert stored.status == "processing"
    assert stored.attempts == 1


def test_process_task_of_missing_task_is_quiet(store):
    process_task(store, 99, None, (0, 0))
    with pytest.raises(TaskNotFoundError):
        store.get(99)


def test_worker_picks_task_from_queue(store):
    task = store.create("t", "")
    stop = threading.Event()
    fake = ScriptedRedis([(QUEUE_KEY.encode(), str(task.id).encode())], stop)
    worker(store, fake, 1, stop)
    assert fake.calls == [([QUEUE_KEY], 1)]
    stored = store.get(task.id)
    assert stored.status == "processing"
    assert stored.attempts == 1


def test_worker_survives_redis_error(store):
    stop = threading.Event()
    fake = ScriptedRedis([redis.exceptions.ConnectionError("down")], stop)
    worker(store, fake, 2, stop)
    assert len(fake.calls) == 1


def test_worker_ignores_empty_poll(store):
    stop = threading.Event()
    fake = ScriptedRedis([None], stop)
    worker(store, fake, 3, stop)
    assert len(fake.calls) == 1
    assert stop.is_set()