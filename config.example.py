# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Put local overrides in .env (gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Switches
    "TASKPAD_CONSOLE_ENABLED": "Run the console REPL (true/false, default true).",
    "TASKPAD_NOTIFICATIONS_ENABLED": "Allow reminder notifications (true/false, default true).",
    "TASKPAD_OFFLINE_ENABLED": "Install + activate the offline cache at start-up (default false).",
    # Offline cache
    "TASKPAD_CACHE_NAME": "Versioned cache name; bump it to drop old caches (default: taskpad-v2).",
    "TASKPAD_SITE_ORIGIN": "Origin the static assets are served from (default: http://localhost:8000).",
    "TASKPAD_APP_SCOPE": "App path under the origin (default: /taskpad/).",
    "TASKPAD_PRECACHE_URLS": "Comma/space separated asset paths to pre-cache on install.",
    "TASKPAD_FETCH_TIMEOUT_SECONDS": "Network timeout for cache misses (default: 10).",
    # Paths (gitignored)
    "TASKPAD_DATA_DIR": "Local data directory (default: .local/taskpad).",
    "TASKPAD_STORAGE_DB_PATH": "Task list storage (default: <data_dir>/storage.sqlite3).",
    "TASKPAD_CACHE_DB_PATH": "Offline cache storage (default: <data_dir>/cache.sqlite3).",
}
