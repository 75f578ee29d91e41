"""
Database package for Docbot.

- **db_connection.py**: The single aiosqlite connection (``db_connection``),
  with serialised write transactions.
- **db_schema.py**: Table and index creation for the scheduled job store.
"""
