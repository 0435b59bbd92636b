# src/taskpad/core/state.py

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..core.ports import KeyValueStorage, Notifier, WindowOpener
from ..tasks.reminder_scheduler import ReminderScheduler
from ..tasks.task_models import Task, TaskFilter

if TYPE_CHECKING:
    from ..offline.worker import OfflineCacheWorker


@dataclass
class AppState:
    """Everything the task operations and the view read or mutate."""

    settings: object

    storage: KeyValueStorage
    notifier: Notifier
    reminders: ReminderScheduler

    tasks: list[Task] = field(default_factory=list)
    current_filter: TaskFilter = TaskFilter.ALL
    dark_mode: bool = False

    cache_worker: OfflineCacheWorker | None = None
    window_opener: WindowOpener | None = None
    clock: Callable[[], float] = time.time
