# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/notifications/network swappable and makes testing easier.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..offline.http import Request, Response


@dataclass(slots=True)
class Notification:
    """A shown reminder; clicking it closes it and opens the app."""

    title: str
    body: str = ""
    tag: str | None = None
    closed: bool = False

    def close(self) -> None:
        self.closed = True


class KeyValueStorage(Protocol):
    """String-keyed string store (the localStorage contract)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class Notifier(Protocol):
    """
    System notification surface used by the reminder scheduler.

    request_permission() returning False means reminders stay silent.
    """

    def request_permission(self) -> bool: ...

    def show(self, *, title: str, body: str, tag: str | None = None) -> Notification: ...


class Fetcher(Protocol):
    """Network port of the offline cache worker."""

    def fetch(self, request: Request) -> Response: ...


class WindowOpener(Protocol):
    def open_window(self, url: str) -> None: ...
