"""SQLite task storage and Redis connection setup."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timezone

import redis

from .models import Task

DEFAULT_DB_PATH = "tasks.db"
DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    title TEXT,
    description TEXT,
    status TEXT,
    attempts INTEGER
)
"""


class TaskNotFoundError(LookupError):
    """Raised when no task has the requested id."""

    def __init__(self, task_id):
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


def _row_to_task(row: sqlite3.Row) -> Task:
    return Task(
        id=row["id"],
        created_at=datetime.fromisoformat(row["created_at"]),
        title=row["title"],
        description=row["description"],
        status=row["status"],
        attempts=row["attempts"],
    )


class TaskStore:
    """Thread-safe access to the tasks table of a SQLite database."""

    def __init__(self, path=None):
        self.path = path or DEFAULT_DB_PATH
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        with self._lock, self._conn:
            self._conn.execute(_SCHEMA)

    def create(self, title, description="") -> Task:
        """Insert a new task with status "new" and return it."""
        task = Task(
            title=title,
            description=description,
            status="new",
            attempts=0,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "INSERT INTO tasks (created_at, title, description, status, attempts)"
                " VALUES (?, ?, ?, ?, ?)",
                (task.created_at.isoformat(), task.title, task.description, task.status, task.attempts),
            )
        task.id = cursor.lastrowid
        return task

    def get(self, task_id) -> Task:
        """Return the task with this id or raise TaskNotFoundError."""
        with self._lock:
            row = self._conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return _row_to_task(row)

    def update_status(self, task_id, status) -> bool:
        """Set the status and count one more attempt; report whether a row changed."""
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "UPDATE tasks SET status = ?, attempts = attempts + 1 WHERE id = ?",
                (status, task_id),
            )
        return cursor.rowcount > 0

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "TaskStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def init_db(path=None) -> TaskStore:
    """Open (and create if needed) the task database; defaults to tasks.db."""
    return TaskStore(path)


def _split_address(addr):
    if not addr:
        return DEFAULT_REDIS_HOST, DEFAULT_REDIS_PORT
    host, sep, port = addr.rpartition(":")
    if not sep:
        return addr, DEFAULT_REDIS_PORT
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"invalid redis address {addr!r}") from None
    return host or DEFAULT_REDIS_HOST, port_number


def init_redis(addr=None, password=None, db=0) -> redis.Redis:
    """Create a Redis client for "host:port" and check the connection with PING."""
    host, port = _split_address(addr)
    client = redis.Redis(host=host, port=port, password=password or None, db=db)
    client.ping()
    return client