# src/taskpad/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs everything on one asyncio loop:
- reminders re-armed from persisted tasks,
- optional offline cache install/activate (in a worker thread),
- the console REPL.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_api import load_state
from ..tasks.task_store import save_tasks

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    state.reminders.cancel_all()
    try:
        save_tasks(state.storage, state.tasks)
    except Exception:
        logger.exception("Failed to save tasks on shutdown.")


async def run_app(state: AppState) -> None:
    state.reminders.bind_loop(asyncio.get_running_loop())
    state.reminders.request_permission()
    load_state(state)

    worker = state.cache_worker
    if worker is not None and getattr(state.settings, "offline_enabled", False):
        if await asyncio.to_thread(worker.install):
            await asyncio.to_thread(worker.activate)

    if getattr(state.settings, "console_enabled", True):
        await run_console_loop(state)
    else:
        logger.info("Console disabled. Serving reminders only. Press Ctrl+C to stop.")
        await asyncio.Event().wait()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/taskpad")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "taskpad"))

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
