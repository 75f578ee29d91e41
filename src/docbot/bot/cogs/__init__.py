"""
Discord cogs for Docbot.

- **chat_cmds.py**: ``/chat`` documentation questions.
- **schedule_cmds.py**: ``/schedule add|delete|list|help``.
- **scheduler_runtime.py**: Polling loop that fires due scheduled jobs.
"""
