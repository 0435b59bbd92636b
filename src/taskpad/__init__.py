"""Personal task list with reminders and an offline asset cache."""

__version__ = "0.1.0"
