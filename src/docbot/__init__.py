"""
Docbot - Documentation Q&A and Scheduled Moderation Discord Bot

Core Components:

- **Chat**: ``/chat`` answers documentation questions by embedding the
  question (OpenAI), retrieving the closest documentation chunks (Pinecone)
  and generating a grounded answer that cites one source URL.
- **Scheduler**: ``/schedule`` defers moderation commands (ban, slowmode,
  timeout, unban, untimeout, warn) to a later time; jobs persist in SQLite
  and every add, delete and execution is audited to the mod-log channel.
- **Configuration**: YAML application config plus ``.env`` secrets.
"""
