# src/taskpad/tasks/task_store.py

"""
Persistence of the task list and UI preferences in a KeyValueStorage.

The whole list lives under one key as a JSON array (newest first), exactly as
the browser build keeps it in localStorage, so both can share exported data.
"""

from __future__ import annotations

import json
import logging

from ..core.ports import KeyValueStorage
from .task_models import Task

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
DARK_MODE_KEY = "darkMode"


def load_tasks(storage: KeyValueStorage) -> list[Task]:
    """
    Load the persisted task list.

    Absent key, corrupt JSON or a non-array value all yield an empty list.
    Records that cannot be tasks are skipped one by one.
    """
    raw = storage.get_item(TASKS_KEY)
    if not raw:
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored task list is not valid JSON; starting with an empty list.")
        return []

    if not isinstance(data, list):
        logger.warning("Stored task list is %s, not an array; ignoring it.", type(data).__name__)
        return []

    tasks: list[Task] = []
    seen: set[int] = set()
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            task = Task.from_dict(item)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping unreadable stored task: %s", e)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate stored task id=%s", task.id)
            continue
        seen.add(task.id)
        tasks.append(task)

    logger.debug("Loaded %d tasks", len(tasks))
    return tasks


def save_tasks(storage: KeyValueStorage, tasks: list[Task]) -> None:
    payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
    storage.set_item(TASKS_KEY, payload)
    logger.debug("Saved %d tasks", len(tasks))


def load_dark_mode(storage: KeyValueStorage) -> bool:
    raw = storage.get_item(DARK_MODE_KEY)
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "on", "dark"}


def save_dark_mode(storage: KeyValueStorage, enabled: bool) -> None:
    storage.set_item(DARK_MODE_KEY, "true" if enabled else "false")
