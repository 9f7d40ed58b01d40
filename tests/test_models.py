from datetime import datetime, timezone

from taskqueue_service.models import Task


def test_defaults_describe_a_new_task():
    task = Task(title="write report")
    assert task.status == "new"
    assert task.attempts == 0
    assert task.description == ""


def test_to_dict_has_the_documented_fields():
    task = Task(id=3, title="a", description="b", status="checking", attempts=2)
    data = task.to_dict()
    assert set(data) == {"id", "created_at", "title", "description", "status", "attempts"}
    assert data["id"] == 3
    assert data["title"] == "a"
    assert data["description"] == "b"
    assert data["status"] == "checking"
    assert data["attempts"] == 2


def test_to_dict_formats_utc_timestamp_with_z_suffix():
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    data = Task(title="a", created_at=stamp).to_dict()
    assert data["created_at"] == "2024-01-02T03:04:05Z"


def test_to_dict_timestamp_round_trips():
    task = Task(title="a")
    text = task.to_dict()["created_at"].replace("Z", "+00:00")
    assert datetime.fromisoformat(text) == task.created_at


def test_created_at_is_timezone_aware():
    task = Task(title="a")
    assert task.created_at.utcoffset() is not None
    assert task.created_at.utcoffset().total_seconds() == 0