"""
Persistent storage for scheduled jobs.

Rows are written once and never updated; ``next_run_at`` is INTEGER unix
seconds (UTC).
"""

from __future__ import annotations

from typing import Any, List

import aiosqlite

from docbot.datatypes.schedule_datatypes import ScheduledJob
from docbot.util.logger import get_logger

logger = get_logger("scheduled_job_repo")

_COLUMNS = "id, kind, next_run_at, command_text, parameters, moderator, guild_id, channel_id"


def _row_to_job(row: Any) -> ScheduledJob:
    return ScheduledJob(
        job_id=int(row[0]),
        kind=str(row[1]),
        next_run_at=ScheduledJob.from_unix(row[2]),
        command_text=str(row[3]),
        parameters=row[4],
        moderator=str(row[5]),
        guild_id=int(row[6]),
        channel_id=int(row[7]),
    )


class ScheduledJobRepo:
    """Low-level CRUD for the ``scheduled_jobs`` table."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @staticmethod
    async def insert(
        conn: aiosqlite.Connection,
        *,
        kind: str,
        next_run_at: int,
        command_text: str,
        parameters: str | None,
        moderator: str,
        guild_id: int,
        channel_id: int,
    ) -> int:
        """Insert a job row and return its new id."""
        cursor = await conn.execute(
            """
            INSERT INTO scheduled_jobs
                (kind, next_run_at, command_text, parameters, moderator, guild_id, channel_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (kind, next_run_at, command_text, parameters, moderator, guild_id, channel_id),
        )
        return int(cursor.lastrowid)

    @staticmethod
    async def delete(conn: aiosqlite.Connection, job_id: int) -> bool:
        """Delete a job row. Returns False when the row was already gone."""
        cursor = await conn.execute("DELETE FROM scheduled_jobs WHERE id = ?", (job_id,))
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    async def find_by_id(
        conn: aiosqlite.Connection,
        job_id: int,
        guild_id: int | None = None,
    ) -> List[ScheduledJob]:
        """Return every row with this id (zero or one), optionally only within one guild."""
        query = f"SELECT {_COLUMNS} FROM scheduled_jobs WHERE id = ?"
        params: list[Any] = [job_id]
        if guild_id is not None:
            query += " AND guild_id = ?"
            params.append(guild_id)
        cursor = await conn.execute(query, params)
        return [_row_to_job(row) for row in await cursor.fetchall()]

    @staticmethod
    async def find(
        conn: aiosqlite.Connection,
        kind: str,
        command_text: str | None = None,
        guild_id: int | None = None,
    ) -> List[ScheduledJob]:
        """Return rows of ``kind``, optionally filtered by command name and guild, soonest first."""
        query = f"SELECT {_COLUMNS} FROM scheduled_jobs WHERE kind = ?"
        params: list[Any] = [kind]
        if command_text is not None:
            query += " AND command_text = ?"
            params.append(command_text)
        if guild_id is not None:
            query += " AND guild_id = ?"
            params.append(guild_id)
        cursor = await conn.execute(query + " ORDER BY next_run_at ASC, id ASC", params)
        return [_row_to_job(row) for row in await cursor.fetchall()]

    @staticmethod
    async def get_due(conn: aiosqlite.Connection, now: int) -> List[ScheduledJob]:
        """Return all rows with ``next_run_at <= now``, soonest first."""
        cursor = await conn.execute(
            f"SELECT {_COLUMNS} FROM scheduled_jobs WHERE next_run_at <= ? ORDER BY next_run_at ASC, id ASC",
            (now,),
        )
        return [_row_to_job(row) for row in await cursor.fetchall()]


# Module-level singleton
scheduled_job_repo = ScheduledJobRepo()
