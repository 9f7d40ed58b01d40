"""Command that starts the task workers and the HTTP server."""

from __future__ import annotations

import argparse
import logging
import os
import sqlite3
import threading

import redis

from .api import create_app
from .storage import init_db, init_redis
from .worker import worker

WORKER_COUNT = 5
PORT = 8080

log = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Run the service; configuration comes from SQLITE_PATH, REDIS_ADDR and REDIS_PASS."""
    parser = argparse.ArgumentParser(
        prog="taskqueue-service",
        description="Task service: HTTP API on port 8080 with Redis-fed workers.",
    )
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        store = init_db(os.environ.get("SQLITE_PATH"))
    except sqlite3.Error as exc:
        log.error("db init error: %s", exc)
        return 1

    try:
        redis_client = init_redis(os.environ.get("REDIS_ADDR"), os.environ.get("REDIS_PASS"), 0)
    except (redis.RedisError, ValueError) as exc:
        log.error("redis connect error: %s", exc)
        store.close()
        return 1

    stop_event = threading.Event()
    threads = [
        threading.Thread(
            target=worker,
            args=(store, redis_client, worker_id, stop_event),
            name=f"worker-{worker_id}",
            daemon=True,
        )
        for worker_id in range(1, WORKER_COUNT + 1)
    ]
    for thread in threads:
        thread.start()

    app = create_app(store, redis_client)
    log.info("Starting HTTP server on :%d", PORT)
    try:
        app.run(host="0.0.0.0", port=PORT)
    finally:
        stop_event.set()
        for thread in threads:
            thread.join()
        store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())