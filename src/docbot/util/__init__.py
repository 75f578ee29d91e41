"""
Shared utilities for Docbot.

- **logger.py**: Session-wide logging setup (prompt_toolkit console handler and
  a per-session log file) plus the global exception hook.
- **retry.py**: Bounded fixed-delay retry helper used by the embedding client.
- **format_utils.py**: Human-readable timestamp and duration formatting.
"""
