from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import structlog

from .models import TodoEntity
from .store import TodoStore

log = structlog.get_logger()

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Render ``moment`` as UTC ISO-8601 with milliseconds and a 'Z' suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# PUBLIC_INTERFACE
class TodoService:
    """
    Todo use-cases over an injected store.

    ``clock`` must return timezone-aware datetimes. The service owns the
    store for its lifetime: ``open`` verifies the store is reachable and
    ``close`` releases it. Toggle and delete are unguarded read-modify-write
    sequences, so concurrent writers can lose each other's changes.
    """

    def __init__(
        self,
        store: TodoStore,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._clock = clock or _utcnow

    def open(self) -> None:
        """Fail fast if the store cannot be reached."""
        self._store.ping()
        log.info("Store connection verified")

    def close(self) -> None:
        self._store.close()

    def list_todos(self) -> List[TodoEntity]:
        return self._store.read_all()

    def create_todo(self, name: str, task: str) -> TodoEntity:
        """
        Build a new record and prepend it to the list.

        The id is the creation time in epoch milliseconds, so two records
        created within the same millisecond share an id.
        """
        now = self._clock()
        record: TodoEntity = {
            "id": str((now - _EPOCH) // timedelta(milliseconds=1)),
            "name": name.strip(),
            "task": task.strip(),
            "done": False,
            "createdAt": iso_timestamp(now),
        }
        self._store.append(record)
        log.info("Todo created", todo_id=record["id"])
        return record

    def toggle_todo(self, todo_id: str) -> None:
        def flip(record: TodoEntity) -> Optional[TodoEntity]:
            if record.get("id") == todo_id:
                record["done"] = not record.get("done", False)
            return record

        self._rewrite(flip)
        log.info("Todo toggled", todo_id=todo_id)

    def delete_todo(self, todo_id: str) -> None:
        self._rewrite(lambda record: None if record.get("id") == todo_id else record)
        log.info("Todo deleted", todo_id=todo_id)

    def _rewrite(self, transform: Callable[[TodoEntity], Optional[TodoEntity]]) -> None:
        # Read everything, map each record (None drops it), replace the whole list.
        updated: List[TodoEntity] = []
        for record in self._store.read_all():
            result = transform(record)
            if result is not None:
                updated.append(result)
        self._store.replace_all(updated)

    def health(self) -> Dict[str, Any]:
        probe = self._store.health()
        payload: Dict[str, Any] = {
            "status": "healthy",
            "timestamp": iso_timestamp(self._clock()),
            "redis": "connected" if probe.connected else "disconnected",
        }
        if probe.ping is not None:
            payload["redis_ping"] = probe.ping
        return payload
