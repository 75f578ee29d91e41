"""
Deferred moderation commands.

- **job_store.py**: SQLite-backed job queue with per-kind callbacks.
- **schedule_service.py**: ``/schedule add|delete|list`` semantics and timer parsing.
- **job_executor.py**: Callback that runs a due scheduled command and audits it.
"""
