"""
Offline cache subsystem.

Components:
- http.py: Request/Response values and the requests-based network fetcher
- cache_storage.py: SQLite-backed named response caches
- worker.py: install/activate/fetch lifecycle (cache-first)
"""
