# tests/test_reminder_scheduler.py

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from taskpad.tasks.reminder_scheduler import ReminderScheduler
from taskpad.tasks.task_api import add_task, clear_completed, delete_task, edit_task, load_state, toggle_task


def _deadline_in(clock, seconds: float, lead_minutes: int = 0) -> datetime:
    """Deadline such that the reminder fires `seconds` from the fake now."""
    return datetime.fromtimestamp(clock.now, UTC) + timedelta(seconds=seconds, minutes=lead_minutes)


@pytest.mark.asyncio
async def test_reminder_fires_before_deadline(state, notifier, clock) -> None:
    task = add_task(
        state,
        "Dentist",
        deadline=_deadline_in(clock, 0.02, lead_minutes=15),
        notification_time=15,
    )
    assert state.reminders.is_armed(task.id)

    await asyncio.sleep(0.1)

    assert len(notifier.shown) == 1
    shown = notifier.shown[0]
    assert shown.tag == str(task.id)
    assert "Dentist" in shown.body
    assert "15 min" in shown.body
    assert not state.reminders.is_armed(task.id)
    assert state.reminders.last_notification is shown


@pytest.mark.asyncio
async def test_undeadlined_and_past_due_tasks_have_no_timer(state, notifier, clock) -> None:
    plain = add_task(state, "No deadline")
    no_lead = add_task(state, "No lead", deadline=_deadline_in(clock, 60))
    past = add_task(state, "Past", deadline=_deadline_in(clock, -60), notification_time=0)
    inside_lead = add_task(state, "Inside lead window", deadline=_deadline_in(clock, 60), notification_time=5)

    for t in (plain, no_lead, past, inside_lead):
        assert not state.reminders.is_armed(t.id)

    await asyncio.sleep(0.02)
    assert notifier.shown == []


@pytest.mark.asyncio
async def test_delete_cancels_pending_reminder(state, notifier, clock) -> None:
    task = add_task(state, "Soon", deadline=_deadline_in(clock, 0.02), notification_time=0)
    assert state.reminders.is_armed(task.id)

    delete_task(state, task.id)
    assert not state.reminders.is_armed(task.id)

    await asyncio.sleep(0.1)
    assert notifier.shown == []


@pytest.mark.asyncio
async def test_toggle_cancels_and_rearms(state, clock) -> None:
    task = add_task(state, "Pay rent", deadline=_deadline_in(clock, 3600), notification_time=0)
    assert state.reminders.is_armed(task.id)

    toggle_task(state, task.id)
    assert not state.reminders.is_armed(task.id)

    toggle_task(state, task.id)
    assert state.reminders.is_armed(task.id)

    toggle_task(state, task.id)
    clear_completed(state)
    assert state.reminders.armed_keys() == []


@pytest.mark.asyncio
async def test_edit_rearms_with_new_values(state, clock) -> None:
    task = add_task(state, "Call", deadline=_deadline_in(clock, 3600), notification_time=10)
    assert state.reminders.is_armed(task.id)

    edit_task(state, task.id, notification_time=None)
    assert not state.reminders.is_armed(task.id)

    edit_task(state, task.id, notification_time=10)
    assert state.reminders.is_armed(task.id)

    edit_task(state, task.id, deadline=_deadline_in(clock, -10))
    assert not state.reminders.is_armed(task.id)


@pytest.mark.asyncio
async def test_reload_recomputes_timers_without_retroactive_fire(state, notifier, clock) -> None:
    future = add_task(state, "Future", deadline=_deadline_in(clock, 3600), notification_time=0)
    soon = add_task(state, "Soon", deadline=_deadline_in(clock, 30), notification_time=0)

    # Simulate a restart long after "Soon" was due.
    state.reminders.cancel_all()
    clock.advance(120)
    load_state(state)

    assert state.reminders.armed_keys() == [future.id]
    assert not state.reminders.is_armed(soon.id)

    await asyncio.sleep(0.02)
    assert notifier.shown == []
    state.reminders.cancel_all()


@pytest.mark.asyncio
async def test_permission_denied_disables_reminders(state, notifier, clock) -> None:
    notifier.permitted = False

    assert state.reminders.request_permission() is False
    task = add_task(state, "Quiet", deadline=_deadline_in(clock, 0.01), notification_time=0)

    assert not state.reminders.is_armed(task.id)
    await asyncio.sleep(0.05)
    assert notifier.shown == []


@pytest.mark.asyncio
async def test_arm_by_key_replaces_previous_timer(notifier) -> None:
    scheduler = ReminderScheduler(notifier)
    fired: list[str] = []

    scheduler.arm(1, 0.01, lambda: fired.append("first"))
    scheduler.arm(1, 0.01, lambda: fired.append("second"))
    scheduler.arm(2, 0.01, lambda: fired.append("other"))
    assert scheduler.cancel(2) is True
    assert scheduler.cancel(2) is False

    await asyncio.sleep(0.05)
    assert fired == ["second"]
    assert scheduler.armed_keys() == []
