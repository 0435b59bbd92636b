# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any


class TaskFilter(StrEnum):
    """
    Visible subset of the list.

    The Spanish names used by older saved sessions and bookmarks
    ("todas", "pendientes", "completadas") are accepted by parse().
    """

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter | None:
        if not raw:
            return None
        key = raw.strip().lower()
        try:
            return cls(key)
        except ValueError:
            return _FILTER_ALIASES.get(key)


_FILTER_ALIASES = {
    "todas": TaskFilter.ALL,
    "pendientes": TaskFilter.PENDING,
    "completadas": TaskFilter.COMPLETED,
    "done": TaskFilter.COMPLETED,
    "open": TaskFilter.PENDING,
}


def to_iso(dt: datetime) -> str:
    """Serialize like Date.prototype.toISOString(): UTC, milliseconds, 'Z'."""
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_utc(dt: datetime) -> datetime:
    # Naive values are local wall-clock time, as `new Date("2026-10-20T18:00")` reads them.
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(UTC)


def from_iso(raw: str) -> datetime:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Records written by this app always carry an offset ('Z'). A timestamp
    without one is read as local time, the same rule truncate_ms() applies.
    """
    return _as_utc(datetime.fromisoformat(raw))


def truncate_ms(dt: datetime) -> datetime:
    """Normalize to an aware UTC datetime with millisecond precision (naive = local time)."""
    dt = _as_utc(dt)
    return dt.replace(microsecond=dt.microsecond // 1000 * 1000)


def datetime_from_ms(ms: int) -> datetime:
    return datetime.fromtimestamp(ms // 1000, UTC).replace(microsecond=(ms % 1000) * 1000)


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool
    created_at: datetime

    deadline: datetime | None = None
    notification_time: int | None = None  # minutes before deadline

    def reminder_at(self) -> datetime | None:
        """When the reminder should fire, or None if the task has no reminder."""
        if self.deadline is None or self.notification_time is None:
            return None
        return self.deadline - timedelta(minutes=self.notification_time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": to_iso(self.created_at),
            "deadline": to_iso(self.deadline) if self.deadline is not None else None,
            "notificationTime": self.notification_time,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from its persisted JSON form.

        Raises ValueError/TypeError/KeyError on records that cannot be a task
        (missing id, empty text, unparsable timestamps, negative lead time).
        Only a JSON true marks a task completed.
        """
        task_id = raw["id"]
        if isinstance(task_id, bool) or not isinstance(task_id, int | float):
            raise TypeError(f"task id must be a number, got {task_id!r}")

        text = str(raw.get("text") or "").strip()
        if not text:
            raise ValueError(f"task {task_id} has empty text")

        created_raw = raw.get("createdAt")
        created_at = from_iso(created_raw) if created_raw else datetime_from_ms(int(task_id))

        deadline_raw = raw.get("deadline")
        deadline = from_iso(deadline_raw) if deadline_raw else None

        lead_raw = raw.get("notificationTime")
        notification_time = int(lead_raw) if lead_raw is not None and lead_raw != "" else None
        if notification_time is not None and notification_time < 0:
            raise ValueError(f"task {task_id} has a negative reminder lead time")

        return cls(
            id=int(task_id),
            text=text,
            completed=raw.get("completed") is True,
            created_at=created_at,
            deadline=deadline,
            notification_time=notification_time,
        )
