# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
import threading
import webbrowser
from datetime import datetime

from ..cli.commands import ALERT_PREFIX, registry as command_registry
from ..core.ports import Notification
from ..core.state import AppState
from ..render.view import project_view, render_text
from ..tasks.task_api import EmptyTaskTextError, add_task

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts_block(text: str) -> None:
    ts = _ts_local()
    lines = text.splitlines() or [""]
    for i, line in enumerate(lines):
        # keep nice alignment for multi-line command output
        prefix = f"[{ts}] " if i == 0 else " " * (len(ts) + 3)
        print(prefix + line, flush=True)


class ConsoleNotifier:
    """Notifier that prints reminders into the console."""

    def __init__(self, *, permitted: bool = True) -> None:
        self._permitted = permitted

    def request_permission(self) -> bool:
        return self._permitted

    def show(self, *, title: str, body: str, tag: str | None = None) -> Notification:
        # Reminders arrive while the prompt is waiting; start on a fresh line.
        sys.stdout.write("\n")
        _print_ts_block(f"[NOTIFY] {title}: {body} (/open to open the app)")
        sys.stdout.write(PROMPT)
        sys.stdout.flush()
        return Notification(title=title, body=body, tag=tag)


class BrowserWindowOpener:
    """Opens the app page in the user's default web browser."""

    def open_window(self, url: str) -> None:
        if not webbrowser.open(url, new=2):
            logger.warning("No web browser could open %s", url)


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue[str | None]) -> threading.Thread:
    """
    Read stdin in a daemon thread and hand lines to the event loop.

    None is queued on EOF / Ctrl+C so the console loop can finish.
    """

    def _reader() -> None:
        while True:
            try:
                line = input()
            except (EOFError, KeyboardInterrupt):
                loop.call_soon_threadsafe(lines.put_nowait, None)
                return
            loop.call_soon_threadsafe(lines.put_nowait, line)

    t = threading.Thread(target=_reader, name="console-stdin", daemon=True)
    t.start()
    return t


async def handle_console_line(state: AppState, user_input: str) -> str:
    """Commands go to the registry; any other text becomes a new task."""
    try:
        cmd_response = await command_registry.dispatch(state, user_input, emit=_print_ts_block)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    if cmd_response is not None:
        return cmd_response

    try:
        add_task(state, user_input)
    except EmptyTaskTextError as e:
        return f"{ALERT_PREFIX}{e}"
    return render_text(project_view(state))


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.tasks))
    _print_ts_block("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.")
    _print_ts_block(render_text(project_view(state)))

    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[str | None] = asyncio.Queue()
    _start_stdin_reader(loop, lines)

    while True:
        print(PROMPT, end="", flush=True)
        raw = await lines.get()
        if raw is None:
            logger.info("Console EOF received, exiting.")
            print()
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        _print_ts_block(await handle_console_line(state, user_input))

    logger.info("Console connector finished.")
