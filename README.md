# taskqueue-service

This is a small HTTP service for managing tasks. Tasks are stored in SQLite and their
IDs are pushed onto the Redis list `task_queue`. Five background worker
threads take IDs off the queue. Each worker moves a task through these statuses:

`new` → `processing` → `checking` → `approved`

Each status change adds one to the task's `attempts` counter. A fully
processed task ends as `approved` with `attempts` equal to 3. A task stays in
`processing` for 10 seconds and in `checking` for 5 seconds.

## Installation

```
pip install .
```

## Running

```
taskqueue-service
```

The command takes no options apart from `--help`. It serves HTTP on port
8080 on all interfaces and reads these environment variables:

| Variable      | Meaning                          | Default          |
|---------------|----------------------------------|------------------|
| `SQLITE_PATH` | Path of the SQLite database file | `tasks.db`       |
| `REDIS_ADDR`  | Redis address, `host:port`       | `localhost:6379` |
| `REDIS_PASS`  | Redis password                   | none             |

At startup the service checks Redis with a `PING`. If Redis can't be reached,
or `REDIS_ADDR` has a port that is not a number, the command logs the error
and exits with status 1. When the server stops, the workers are signalled to
stop and the database is closed.

## HTTP API

### `POST /task`

Creates a task and appends its ID to the queue. The body is JSON. `title` is
required and must be a non-empty string. `description` is optional:

```json
{"title": "Write report", "description": "Quarterly numbers"}
```

On success the response is `200` and holds the stored task:

```json
{
  "id": 1,
  "created_at": "2024-01-01T12:00:00.123456Z",
  "title": "Write report",
  "description": "Quarterly numbers",
  "status": "new",
  "attempts": 0
}
```

The service answers `400` with `{"error": "..."}` in these cases:

- the body is not a JSON object;
- `title` or `description` is not a string;
- `title` is missing or empty.

If the database write fails, the response is `500` with
`{"error": "cannot create task"}`. If the push to Redis fails, the service
ignores the error. The task is then stored but not queued.

### `GET /task/<id>`

Returns the task with the given numeric ID. A non-numeric ID or an unknown ID
gets `404` with `{"error": "task not found"}`.

### `GET /swagger/doc.json`

Returns the Swagger 2.0 description of the API as JSON.

## Using it as a library

```python
from taskqueue_service.storage import TaskStore, init_redis
from taskqueue_service.api import create_app

store = TaskStore("tasks.db")
redis_client = init_redis("localhost:6379", None, 0)
app = create_app(store, redis_client)
```

- `taskqueue_service.models.Task`: a dataclass holding the task record. `to_dict()` returns its JSON form, with `created_at` in ISO 8601 and `Z` for UTC.
- `taskqueue_service.storage.TaskStore(path)`: opens or creates the `tasks` table. It is thread-safe and can be used as a context manager. Its methods are:
  - `create(title, description)` stores a new task.
  - `get(task_id)` returns a task or raises `TaskNotFoundError`.
  - `update_status(task_id, status)` sets the status and counts one more attempt. It returns whether a row changed.
  - `close()` closes the database.
- `init_db(path)`: returns a `TaskStore`. The default path is `tasks.db`.
- `init_redis(addr, password, db)`: returns a connected `redis.Redis` client.
- `taskqueue_service.worker.process_task(store, task_id, stop_event, delays)`: runs one task through its stages. `delays` defaults to `(10.0, 5.0)`. If `stop_event` is set during a wait, the task stops early and `ProcessingCancelled` is raised.
- `worker(store, redis_client, worker_id, stop_event)`: the loop that consumes the queue. Without a `stop_event` it runs forever. With one, it polls Redis once a second and returns after the event is set.
- `decode_task_id(payload)`: decodes a queued JSON ID. It returns 0 for anything that is not an unsigned 64-bit integer.
- `taskqueue_service.api.swagger_spec()`: returns a copy of the Swagger description.

## What it does not do

The service serves only the Swagger description document. It has no
interactive Swagger UI page.

## Tests

```
pip install .[test]
pytest
```