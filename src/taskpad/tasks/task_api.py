# src/taskpad/tasks/task_api.py

from __future__ import annotations

"""
Task operations over AppState.

Every mutation follows the same order:
- change state.tasks in place,
- persist the whole list,
- cancel / re-arm the affected reminder timers.
Rendering is the caller's job (project_view after each call).
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..core.state import AppState
from .task_models import Task, TaskFilter, datetime_from_ms, truncate_ms
from .task_store import load_dark_mode, load_tasks, save_dark_mode, save_tasks

logger = logging.getLogger(__name__)

UNSET: Any = object()


class EmptyTaskTextError(ValueError):
    """Task text is empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__("Please write a task.")


class TaskNotFoundError(KeyError):
    def __init__(self, task_id: int) -> None:
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"No task with id {self.task_id}."


def _clean_text(text: str | None) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise EmptyTaskTextError()
    return cleaned


def _clean_lead(notification_time: int | None) -> int | None:
    if notification_time is None:
        return None
    lead = int(notification_time)
    if lead < 0:
        raise ValueError("Reminder lead time cannot be negative.")
    return lead


def _clean_deadline(deadline: datetime | None) -> datetime | None:
    return truncate_ms(deadline) if deadline is not None else None


def _next_id(state: AppState) -> int:
    now_ms = int(state.clock() * 1000)
    newest = max((t.id for t in state.tasks), default=0)
    # Two adds in the same millisecond must not share an id.
    return max(now_ms, newest + 1)


def find_task(state: AppState, task_id: int) -> Task:
    for task in state.tasks:
        if task.id == task_id:
            return task
    raise TaskNotFoundError(task_id)


# ---- pure helpers ----


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    if task_filter == TaskFilter.PENDING:
        return [t for t in tasks if not t.completed]
    if task_filter == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def pending_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if not t.completed)


# ---- lifecycle ----


def load_state(state: AppState) -> None:
    """Reload tasks and preferences from storage, then recompute all reminders."""
    state.tasks = load_tasks(state.storage)
    state.dark_mode = load_dark_mode(state.storage)
    state.reminders.rearm_all(state.tasks)
    logger.info("Loaded %d tasks (%d pending)", len(state.tasks), pending_count(state.tasks))


def _persist(state: AppState) -> None:
    save_tasks(state.storage, state.tasks)


# ---- mutations ----


def add_task(
    state: AppState,
    text: str,
    *,
    deadline: datetime | None = None,
    notification_time: int | None = None,
) -> Task:
    """Prepend a new task. Raises EmptyTaskTextError and leaves the list untouched on empty text."""
    cleaned = _clean_text(text)
    lead = _clean_lead(notification_time)

    task_id = _next_id(state)
    task = Task(
        id=task_id,
        text=cleaned,
        completed=False,
        created_at=datetime_from_ms(task_id),
        deadline=_clean_deadline(deadline),
        notification_time=lead,
    )
    state.tasks.insert(0, task)
    _persist(state)
    state.reminders.sync_task(task)

    logger.info("Task added id=%s deadline=%s lead=%s", task.id, task.deadline, task.notification_time)
    return task


def delete_task(state: AppState, task_id: int) -> Task:
    task = find_task(state, task_id)
    state.tasks = [t for t in state.tasks if t.id != task_id]
    _persist(state)
    state.reminders.cancel(task_id)
    logger.info("Task deleted id=%s", task_id)
    return task


def toggle_task(state: AppState, task_id: int) -> Task:
    task = find_task(state, task_id)
    task.completed = not task.completed
    _persist(state)
    state.reminders.sync_task(task)
    logger.info("Task %s -> %s", task_id, "completed" if task.completed else "pending")
    return task


def edit_task(
    state: AppState,
    task_id: int,
    *,
    text: str | None = UNSET,
    deadline: datetime | None = UNSET,
    notification_time: int | None = UNSET,
) -> Task:
    """
    Update the given fields of a task; omitted fields keep their value.

    Passing deadline=None / notification_time=None removes the reminder.
    The reminder timer is cancelled and re-armed from the new values.
    """
    task = find_task(state, task_id)

    # Validate everything before touching the task.
    new_text = _clean_text(text) if text is not UNSET else task.text
    new_deadline = _clean_deadline(deadline) if deadline is not UNSET else task.deadline
    new_lead = _clean_lead(notification_time) if notification_time is not UNSET else task.notification_time

    task.text = new_text
    task.deadline = new_deadline
    task.notification_time = new_lead

    _persist(state)
    state.reminders.sync_task(task)
    logger.info("Task edited id=%s", task_id)
    return task


def clear_completed(state: AppState) -> int:
    removed = [t for t in state.tasks if t.completed]
    if not removed:
        return 0
    state.tasks = [t for t in state.tasks if not t.completed]
    _persist(state)
    for t in removed:
        state.reminders.cancel(t.id)
    logger.info("Cleared %d completed tasks", len(removed))
    return len(removed)


def set_filter(state: AppState, task_filter: TaskFilter) -> TaskFilter:
    state.current_filter = task_filter
    return task_filter


def visible_tasks(state: AppState) -> list[Task]:
    return filter_tasks(state.tasks, state.current_filter)


def set_dark_mode(state: AppState, enabled: bool) -> bool:
    state.dark_mode = bool(enabled)
    save_dark_mode(state.storage, state.dark_mode)
    return state.dark_mode
