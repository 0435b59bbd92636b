# src/taskpad/cli/commands.py

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, cast

from ..core.state import AppState
from ..offline.http import Request
from ..render.view import project_view, render_text
from ..tasks.task_api import (
    EmptyTaskTextError,
    TaskNotFoundError,
    UNSET,
    add_task,
    clear_completed,
    delete_task,
    edit_task,
    set_dark_mode,
    set_filter,
    toggle_task,
)
from ..tasks.task_models import TaskFilter

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ALERT_PREFIX = "[ALERT] "
_NONE_WORDS = ("none", "-", "off", "clear")


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> CommandResult | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Coroutine handlers return an awaitable; see dispatch().
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    async def dispatch(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """Like handle(), but awaits coroutine handlers (network-bound commands)."""
        result = self.handle(state, line, emit)
        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        lines.append("Anything not starting with '/' is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _parse_deadline(raw: str) -> datetime | None:
    if raw.lower() in _NONE_WORDS:
        return None
    # "2026-10-20T18:00" or "2026-10-20_18:00" (no spaces inside one arg)
    return datetime.fromisoformat(raw.replace("_", "T"))


def _parse_lead(raw: str) -> int | None:
    if raw.lower() in _NONE_WORDS:
        return None
    return int(raw.rstrip("m"))


def parse_task_args(args: list[str]) -> tuple[str, dict[str, Any]]:
    """
    Split "/add" style arguments into the task text and options.

    --due <iso datetime|none>   deadline (local time unless an offset is given)
    --remind <minutes|none>     reminder lead time before the deadline

    Raises ValueError on a malformed option.
    """
    words: list[str] = []
    opts: dict[str, Any] = {}
    it = iter(args)
    for token in it:
        if token in ("--due", "-d"):
            value = next(it, None)
            if value is None:
                raise ValueError("--due needs a date, e.g. --due 2026-10-20T18:00")
            opts["deadline"] = _parse_deadline(value)
        elif token in ("--remind", "-r"):
            value = next(it, None)
            if value is None:
                raise ValueError("--remind needs minutes, e.g. --remind 15")
            opts["notification_time"] = _parse_lead(value)
        else:
            words.append(token)
    return " ".join(words), opts


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def _list_text(state: AppState) -> str:
    return render_text(project_view(state))


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return _list_text(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <text> [--due 2026-10-20T18:00] [--remind 15]
    """
    try:
        text, opts = parse_task_args(args)
    except ValueError as e:
        return f"Usage: /add <text> [--due YYYY-MM-DDTHH:MM] [--remind MINUTES] ({e})"

    try:
        add_task(state, text, **opts)
    except EmptyTaskTextError as e:
        # Blocking alert; the list stays as it was.
        return f"{ALERT_PREFIX}{e}"
    except ValueError as e:
        return f"Invalid task: {e}"
    return _list_text(state)


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    try:
        toggle_task(state, task_id)
    except TaskNotFoundError as e:
        return str(e)
    return _list_text(state)


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /del <id>"
    try:
        delete_task(state, task_id)
    except TaskNotFoundError as e:
        return str(e)
    return _list_text(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> [new text] [--due <datetime|none>] [--remind <minutes|none>]
    """
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /edit <id> [text] [--due YYYY-MM-DDTHH:MM|none] [--remind MINUTES|none]"

    try:
        text, opts = parse_task_args(args[1:])
    except ValueError as e:
        return f"Usage: /edit <id> [text] [--due ...] [--remind ...] ({e})"

    if not text and not opts:
        return "Nothing to change. Give a new text, --due or --remind."

    try:
        edit_task(
            state,
            task_id,
            text=text if text else UNSET,
            deadline=opts.get("deadline", UNSET),
            notification_time=opts.get("notification_time", UNSET),
        )
    except TaskNotFoundError as e:
        return str(e)
    except EmptyTaskTextError as e:
        return f"{ALERT_PREFIX}{e}"
    except ValueError as e:
        return f"Invalid task: {e}"
    return _list_text(state)


def cmd_clear(state: AppState, args: list[str]) -> str:
    n = clear_completed(state)
    if not n:
        return "No completed tasks to clear."
    return f"Cleared {n} completed task{'s' if n != 1 else ''}.\n{_list_text(state)}"


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter all | pending | completed
    """
    if not args:
        return f"Current filter: {state.current_filter.value}. Use /filter all|pending|completed."

    task_filter = TaskFilter.parse(args[0])
    if task_filter is None:
        return "Usage: /filter all|pending|completed"

    set_filter(state, task_filter)
    return _list_text(state)


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme         -> toggle
    /theme dark    -> dark
    /theme light   -> light
    """
    if not args:
        enabled = not state.dark_mode
    else:
        arg = args[0].lower()
        if arg in ("dark", "on", "1", "true"):
            enabled = True
        elif arg in ("light", "off", "0", "false"):
            enabled = False
        else:
            return "Usage: /theme [dark|light]"

    set_dark_mode(state, enabled)
    return f"Theme: {'dark' if state.dark_mode else 'light'}."


async def cmd_cache(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /cache status      -> worker state and cache names
    /cache install     -> pre-cache static assets, then activate
    /cache get <path>  -> fetch through the worker (cache-first)

    Network work runs in a thread so reminder timers keep firing meanwhile.
    """
    worker = state.cache_worker
    if worker is None:
        return "Offline cache is not configured."

    sub = args[0].lower() if args else "status"

    if sub == "status":
        return (
            "Offline cache:\n"
            f"  Worker: {worker.state.value}\n"
            f"  Cache: {worker.cache_name}\n"
            f"  Scope: {worker.scope_url}"
        )

    if sub == "install":
        logger.debug("Offline cache install requested (cache=%s)", worker.cache_name)
        if emit:
            with contextlib.suppress(Exception):
                emit(f"[CACHE] Pre-caching {len(worker.precache_urls)} files...")
        if not await asyncio.to_thread(worker.install):
            return "Install failed (see log). Offline mode is unavailable."
        removed = await asyncio.to_thread(worker.activate)
        msg = f"Offline cache {worker.cache_name} installed and active."
        if removed:
            msg += f" Removed old caches: {', '.join(removed)}."
        return msg

    if sub == "get":
        if len(args) < 2:
            return "Usage: /cache get <path>"
        resp = await asyncio.to_thread(worker.fetch, Request(url=args[1]))
        if resp is None:
            return f"Could not fetch {args[1]} (offline and not cached)."
        return f"{resp.status} {resp.status_text} {resp.url} ({len(resp.body)} bytes, {resp.type})"

    return "Usage: /cache status | /cache install | /cache get <path>"


def cmd_open(state: AppState, args: list[str]) -> str:
    """
    /open -> "click" the last reminder: close it and open the app page
    """
    worker = state.cache_worker
    if worker is None:
        return "Offline cache is not configured."
    if state.window_opener is None:
        return "No browser available to open the app."

    notification = state.reminders.last_notification
    if notification is None or notification.closed:
        return "No reminder to open."

    worker.handle_notification_click(notification, state.window_opener)
    return f"Opened {worker.scope_url}"


def cmd_status(state: AppState, args: list[str]) -> str:
    reminders = "ON" if state.reminders.enabled else "OFF"
    armed = len(state.reminders.armed_keys())
    worker = state.cache_worker
    offline = worker.state.value if worker is not None else "not configured"
    return (
        "Status:\n"
        f"  Tasks: {len(state.tasks)}\n"
        f"  Filter: {state.current_filter.value}\n"
        f"  Theme: {'dark' if state.dark_mode else 'light'}\n"
        f"  Reminders: {reminders} ({armed} armed)\n"
        f"  Offline cache: {offline}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <text> [--due YYYY-MM-DDTHH:MM] [--remind MINUTES].",
)
registry.register("done", cmd_done, help_text="Toggle completed: /done <id>.", aliases=["toggle"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <id>.", aliases=["delete", "rm"])
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <id> [text] [--due ...|none] [--remind ...|none].",
)
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("filter", cmd_filter, help_text="Filter the list: /filter all|pending|completed.")
registry.register("theme", cmd_theme, help_text="Switch theme: /theme [dark|light].")
registry.register("cache", cmd_cache, help_text="Offline cache: /cache status|install|get <path>.")
registry.register("open", cmd_open, help_text="Open the app page from the last reminder.")
registry.register("status", cmd_status, help_text="Show reminders/filter/offline status.")
