"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter) and the JSON record format
- task_store.py: load/save of the task list in a KeyValueStorage
- reminder_scheduler.py: per-task reminder timers on the asyncio loop
- task_api.py: add/delete/toggle/edit/clear/filter over AppState
"""
