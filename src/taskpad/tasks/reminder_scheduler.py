# src/taskpad/tasks/reminder_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

One event-loop timer per task, keyed by task id:
- a task with a deadline and a lead time gets a timer at (deadline - lead),
- completed tasks and tasks without a deadline have no timer,
- a fire time already in the past is never armed (no retroactive reminders).

Timers run on the asyncio loop that drives the console, so callbacks never
race with task mutations.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable

from ..core.ports import Notification, Notifier
from .task_models import Task

logger = logging.getLogger(__name__)

ReminderCallback = Callable[[], None]


def format_reminder_body(task: Task) -> str:
    if task.deadline is None:
        return task.text
    local = task.deadline.astimezone()
    lead = task.notification_time or 0
    if lead <= 0:
        return f"{task.text} is due now ({local:%Y-%m-%d %H:%M})."
    return f"{task.text} is due in {lead} min ({local:%Y-%m-%d %H:%M})."


class ReminderScheduler:
    """Arm/cancel timers by key on an asyncio loop."""

    def __init__(
        self,
        notifier: Notifier,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        clock: Callable[[], float] = time.time,
        enabled: bool = True,
    ) -> None:
        self._notifier = notifier
        self._loop = loop
        self._clock = clock
        self._handles: dict[int, asyncio.TimerHandle] = {}
        self.enabled = enabled
        self.last_notification: Notification | None = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_permission(self) -> bool:
        """Ask the notifier once; a denial silently disables reminders."""
        try:
            granted = bool(self._notifier.request_permission())
        except Exception:
            logger.exception("Notification permission request failed")
            granted = False
        if not granted:
            logger.info("Notifications not permitted; reminders disabled.")
            self.enabled = False
            self.cancel_all()
        return granted

    # ---- arm / cancel by key ----

    def arm(self, key: int, delay_seconds: float, callback: ReminderCallback) -> None:
        self.cancel(key)
        handle = self._get_loop().call_later(max(0.0, delay_seconds), self._fire, key, callback)
        self._handles[key] = handle
        logger.debug("Reminder armed key=%s in %.1fs", key, delay_seconds)

    def cancel(self, key: int) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug("Reminder cancelled key=%s", key)
        return True

    def cancel_all(self) -> None:
        for key in list(self._handles):
            self.cancel(key)

    def is_armed(self, key: int) -> bool:
        return key in self._handles

    def armed_keys(self) -> list[int]:
        return sorted(self._handles)

    def _fire(self, key: int, callback: ReminderCallback) -> None:
        self._handles.pop(key, None)
        try:
            callback()
        except Exception:
            logger.exception("Reminder callback failed key=%s", key)

    # ---- task-level API ----

    def sync_task(self, task: Task) -> bool:
        """
        Cancel the task's timer, then re-arm it if it still applies.

        Returns True when a timer is armed after the call.
        """
        self.cancel(task.id)

        if not self.enabled or task.completed:
            return False

        fire_at = task.reminder_at()
        if fire_at is None:
            return False

        delay = fire_at.timestamp() - self._clock()
        if delay <= 0:
            logger.debug("Reminder for task %s is in the past; not armed", task.id)
            return False

        title = "Task reminder"
        body = format_reminder_body(task)
        tag = str(task.id)

        def notify() -> None:
            logger.info("Reminder fired for task %s", tag)
            self.last_notification = self._notifier.show(title=title, body=body, tag=tag)

        self.arm(task.id, delay, notify)
        return True

    def rearm_all(self, tasks: Iterable[Task]) -> int:
        """Recompute every timer from the given (persisted) tasks."""
        self.cancel_all()
        armed = sum(1 for t in tasks if self.sync_task(t))
        logger.info("Reminders re-armed: %d", armed)
        return armed
