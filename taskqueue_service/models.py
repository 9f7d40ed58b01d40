"""The task record shared by the HTTP API, the store and the workers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Task:
    """A unit of work moving through the statuses new, processing, checking, approved."""

    id: int = 0
    title: str = ""
    description: str = ""
    status: str = "new"
    attempts: int = 0
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        """Return the JSON representation used on the wire."""
        stamp = self.created_at.isoformat()
        if stamp.endswith("+00:00"):
            stamp = stamp[: -len("+00:00")] + "Z"
        return {
            "id": self.id,
            "created_at": stamp,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "attempts": self.attempts,
        }