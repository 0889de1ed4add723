"""Thread-safe in-memory store of tasks and their logs."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LogEntry:
    timestamp: datetime
    level: str  # info, error, success
    message: str


@dataclass
class Task:
    id: str
    title: str = ""
    status: TaskStatus = TaskStatus.PENDING
    repo_owner: str = ""
    repo_name: str = ""
    issue_number: int = 0
    actor: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    logs: list[LogEntry] = field(default_factory=list)


class Store:
    """Keeps tasks keyed by id; stored objects are shared, not copied."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tasks: dict[str, Task] = {}

    def create(self, task: Task) -> None:
        with self._lock:
            now = _now()
            task.created_at = now
            task.updated_at = now
            self._tasks[task.id] = task

    def get(self, task_id: str) -> Task | None:
        with self._lock:
            return self._tasks.get(task_id)

    def list_tasks(self) -> list[Task]:
        """Return all tasks, newest first."""
        with self._lock:
            return sorted(
                self._tasks.values(),
                key=lambda t: t.created_at,
                reverse=True,
            )

    def update_status(self, task_id: str, status: TaskStatus) -> None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is not None:
                task.status = status
                task.updated_at = _now()

    def add_log(self, task_id: str, level: str, message: str) -> None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is not None:
                task.logs.append(LogEntry(timestamp=_now(), level=level, message=message))
                task.updated_at = _now()

    def supersede_older(self, owner: str, name: str, number: int, except_id: str) -> int:
        """Fail pending tasks for the same repo/issue, except ``except_id``.

        Returns the number of tasks affected.
        """
        affected = 0
        with self._lock:
            for task_id, task in self._tasks.items():
                if task_id == except_id:
                    continue
                same_target = (
                    task.repo_owner == owner
                    and task.repo_name == name
                    and task.issue_number == number
                )
                if same_target and task.status == TaskStatus.PENDING:
                    now = _now()
                    task.status = TaskStatus.FAILED
                    task.updated_at = now
                    task.logs.append(
                        LogEntry(
                            timestamp=now,
                            level="info",
                            message="Superseded by newer /code comment",
                        )
                    )
                    affected += 1
        return affected