"""
Discord embeds for Docbot.

- **chat_embeds.py**: Documentation pointer, query-failed and URL-rejected embeds.
- **schedule_embeds.py**: ``/schedule`` help, listing, error and mod-log audit embeds.
"""
