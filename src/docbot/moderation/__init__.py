"""
Moderation actions for Docbot.

- **schedulable_commands.py**: Closed registry of the moderation commands
  that ``/schedule`` can defer (ban, slowmode, timeout, unban, untimeout, warn).
- **mod_log.py**: Audit sink posting schedule records to the mod-log channel.
"""
