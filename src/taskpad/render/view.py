# src/taskpad/render/view.py

"""
View projection of the task list.

project_view() is the only thing renderers read: it is rebuilt from AppState
after every mutation (O(n), fine at personal-list scale). render_text() serves
the console, render_html() produces the same markup the browser build uses.
"""

from __future__ import annotations

import html
from dataclasses import dataclass

from ..core.state import AppState
from ..tasks.task_api import pending_count, visible_tasks
from ..tasks.task_models import Task, TaskFilter


@dataclass(frozen=True, slots=True)
class TaskItemView:
    id: int
    text: str
    completed: bool
    css_class: str
    deadline_label: str | None
    reminder_label: str | None


@dataclass(frozen=True, slots=True)
class TaskListView:
    items: list[TaskItemView]
    pending_count: int
    count_label: str
    current_filter: TaskFilter
    dark_mode: bool
    total: int


def count_label(n: int) -> str:
    return f"{n} task{'s' if n != 1 else ''} pending"


def _item_view(task: Task) -> TaskItemView:
    deadline_label = None
    if task.deadline is not None:
        deadline_label = f"{task.deadline.astimezone():%Y-%m-%d %H:%M}"

    reminder_label = None
    if task.deadline is not None and task.notification_time is not None:
        reminder_label = f"{task.notification_time} min before"

    return TaskItemView(
        id=task.id,
        text=task.text,
        completed=task.completed,
        css_class="task-item completed" if task.completed else "task-item",
        deadline_label=deadline_label,
        reminder_label=reminder_label,
    )


def project_view(state: AppState) -> TaskListView:
    n_pending = pending_count(state.tasks)
    return TaskListView(
        items=[_item_view(t) for t in visible_tasks(state)],
        pending_count=n_pending,
        count_label=count_label(n_pending),
        current_filter=state.current_filter,
        dark_mode=state.dark_mode,
        total=len(state.tasks),
    )


def render_text(view: TaskListView) -> str:
    header = f"Tasks [{view.current_filter.value}]"
    if view.dark_mode:
        header += " (dark)"
    lines = [header]

    if not view.items:
        lines.append("  (nothing here)")

    for i, item in enumerate(view.items, start=1):
        mark = "x" if item.completed else " "
        extras = [f"id={item.id}"]
        if item.deadline_label:
            extras.append(f"due {item.deadline_label}")
        if item.reminder_label:
            extras.append(f"remind {item.reminder_label}")
        lines.append(f"  {i}. [{mark}] {item.text}  ({', '.join(extras)})")

    lines.append(view.count_label)
    return "\n".join(lines)


def render_html(view: TaskListView) -> str:
    """Markup for the task list container plus the pending counter."""
    theme = "dark" if view.dark_mode else "light"
    out = [f'<ul id="taskList" class="task-list theme-{theme}">']
    for item in view.items:
        checked = " checked" if item.completed else ""
        deadline = ""
        if item.deadline_label:
            deadline = f'\n    <span class="task-deadline">{html.escape(item.deadline_label)}</span>'
        out.append(
            f'  <li class="{item.css_class}" data-id="{item.id}">\n'
            f'    <input type="checkbox" class="task-checkbox"{checked} '
            f'onchange="toggleTask({item.id})">\n'
            f'    <span class="task-text">{html.escape(item.text)}</span>{deadline}\n'
            f'    <button class="delete-btn" onclick="deleteTask({item.id})">Delete</button>\n'
            "  </li>"
        )
    out.append("</ul>")
    out.append(f'<span id="taskCount">{html.escape(view.count_label)}</span>')
    return "\n".join(out)
