"""Workers that take task ids from the Redis queue and move tasks through their statuses."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from contextlib import suppress

import redis

QUEUE_KEY = "task_queue"
PROCESSING_DELAYS = (10.0, 5.0)
_MAX_TASK_ID = 2**64 - 1

log = logging.getLogger(__name__)


class ProcessingCancelled(Exception):
    """Raised when a stop is requested while a task is being processed."""


def decode_task_id(payload) -> int:
    """Decode a queued JSON task id; anything that is not an unsigned integer gives 0."""
    try:
        value = json.loads(payload)
    except (ValueError, TypeError):
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    if not 0 <= value <= _MAX_TASK_ID:
        return 0
    return value


def _pause(seconds, stop_event) -> None:
    if stop_event is None:
        time.sleep(seconds)
    elif stop_event.wait(seconds):
        raise ProcessingCancelled("stop requested")


def process_task(store, task_id, stop_event=None, delays=PROCESSING_DELAYS) -> None:
    """Move a task through processing and checking to approved, waiting between steps."""
    first_delay, second_delay = delays
    with suppress(sqlite3.Error):
        store.update_status(task_id, "processing")
    _pause(first_delay, stop_event)
    with suppress(sqlite3.Error):
        store.update_status(task_id, "checking")
    _pause(second_delay, stop_event)
    store.update_status(task_id, "approved")


def worker(store, redis_client, worker_id, stop_event=None) -> None:
    """Take task ids from the queue and process them until stop_event is set."""
    timeout = 0 if stop_event is None else 1
    while stop_event is None or not stop_event.is_set():
        try:
            item = redis_client.blpop([QUEUE_KEY], timeout=timeout)
        except redis.RedisError as exc:
            log.warning("[worker %d] redis BLPop error: %s", worker_id, exc)
            if stop_event is None:
                time.sleep(1)
            elif stop_event.wait(1):
                break
            continue
        if not item or len(item) < 2:
            continue
        task_id = decode_task_id(item[1])
        log.info("[worker %d] picked task %d", worker_id, task_id)
        try:
            process_task(store, task_id, stop_event)
        except Exception as exc:  # a failing task must not stop the worker
            log.warning("[worker %d] error processing task %d: %s", worker_id, task_id, exc)