# tests/test_task_api.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from taskpad.tasks.task_api import (
    EmptyTaskTextError,
    TaskNotFoundError,
    add_task,
    clear_completed,
    delete_task,
    edit_task,
    filter_tasks,
    load_state,
    pending_count,
    set_filter,
    toggle_task,
    visible_tasks,
)
from taskpad.tasks.task_models import TaskFilter
from taskpad.tasks.task_store import load_tasks


def test_add_prepends_and_persists(state) -> None:
    first = add_task(state, "Buy milk")
    second = add_task(state, "  Call mom  ")

    assert [t.id for t in state.tasks] == [second.id, first.id]
    assert second.text == "Call mom"
    assert second.completed is False
    assert second.id != first.id

    stored = load_tasks(state.storage)
    assert [t.text for t in stored] == ["Call mom", "Buy milk"]


def test_ids_stay_unique_within_one_millisecond(state) -> None:
    ids = {add_task(state, f"task {i}").id for i in range(5)}
    assert len(ids) == 5


def test_created_at_matches_id_timestamp(state, clock) -> None:
    task = add_task(state, "Stamp")
    assert task.id == int(clock.now * 1000)
    assert task.created_at == datetime.fromtimestamp(clock.now, UTC)


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_add_empty_text_leaves_list_unchanged(state, text: str) -> None:
    add_task(state, "Existing")
    before = list(state.tasks)

    with pytest.raises(EmptyTaskTextError):
        add_task(state, text)

    assert state.tasks == before
    assert len(load_tasks(state.storage)) == 1


def test_toggle_twice_restores_state(state) -> None:
    task = add_task(state, "Water plants")

    toggle_task(state, task.id)
    assert state.tasks[0].completed is True
    assert load_tasks(state.storage)[0].completed is True

    toggle_task(state, task.id)
    assert state.tasks[0].completed is False


def test_filters_are_exact_subsets(state) -> None:
    a = add_task(state, "a")
    add_task(state, "b")
    c = add_task(state, "c")
    toggle_task(state, a.id)
    toggle_task(state, c.id)

    pending = filter_tasks(state.tasks, TaskFilter.PENDING)
    completed = filter_tasks(state.tasks, TaskFilter.COMPLETED)

    assert [t.text for t in pending] == ["b"]
    assert all(not t.completed for t in pending)
    assert [t.text for t in completed] == ["c", "a"]
    assert len(filter_tasks(state.tasks, TaskFilter.ALL)) == 3
    assert pending_count(state.tasks) == 1

    set_filter(state, TaskFilter.PENDING)
    assert visible_tasks(state) == pending


def test_delete_removes_task(state) -> None:
    keep = add_task(state, "keep")
    drop = add_task(state, "drop")

    delete_task(state, drop.id)

    assert [t.id for t in state.tasks] == [keep.id]
    assert [t.id for t in load_tasks(state.storage)] == [keep.id]

    with pytest.raises(TaskNotFoundError):
        delete_task(state, drop.id)


def test_clear_completed(state) -> None:
    a = add_task(state, "a")
    b = add_task(state, "b")
    add_task(state, "c")
    toggle_task(state, a.id)
    toggle_task(state, b.id)

    assert clear_completed(state) == 2
    assert [t.text for t in state.tasks] == ["c"]
    assert clear_completed(state) == 0


def test_edit_text_and_validation(state) -> None:
    task = add_task(state, "Old text")

    edit_task(state, task.id, text="New text")
    assert state.tasks[0].text == "New text"

    with pytest.raises(EmptyTaskTextError):
        edit_task(state, task.id, text="   ")
    assert state.tasks[0].text == "New text"

    with pytest.raises(ValueError):
        edit_task(state, task.id, notification_time=-5)

    with pytest.raises(TaskNotFoundError):
        edit_task(state, 42, text="x")


def test_edit_keeps_omitted_fields(state, clock) -> None:
    deadline = datetime.fromtimestamp(clock.now, UTC) - timedelta(days=1)
    task = add_task(state, "Report", deadline=deadline, notification_time=30)

    edit_task(state, task.id, text="Final report")

    assert task.deadline == deadline
    assert task.notification_time == 30

    edit_task(state, task.id, deadline=None)
    assert task.deadline is None
    assert task.notification_time == 30


def test_load_state_restores_tasks_and_theme(state) -> None:
    add_task(state, "persisted")
    state.storage.set_item("darkMode", "true")
    state.tasks = []

    load_state(state)

    assert [t.text for t in state.tasks] == ["persisted"]
    assert state.dark_mode is True
