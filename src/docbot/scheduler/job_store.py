"""
Durable job queue keyed by execution time.

Jobs live in the ``scheduled_jobs`` SQLite table, so they survive restarts.
The store does not remove jobs it fires: the callback registered for the
job's kind is responsible for that, which gives at-least-once delivery. A
job whose callback leaves the row in place is offered again on the next
run.

Execution times are stored as whole unix seconds. Any sub-second part of a
requested time is truncated, so a job can fire up to one second earlier
than asked.

Runtime
-------
:meth:`JobStore.run_due_jobs` fires every due job in execution-time order.
It is driven by :class:`docbot.bot.cogs.scheduler_runtime.SchedulerRuntimeCog`,
which calls it from a ``tasks.loop``.
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Set

from docbot.database.db_connection import ConnectionManager, db_connection
from docbot.datatypes.schedule_datatypes import ScheduledJob
from docbot.repositories.scheduled_job_repo import scheduled_job_repo
from docbot.util.format_utils import to_utc
from docbot.util.logger import get_logger

logger = get_logger("job_store")

JobCallback = Callable[[ScheduledJob], Awaitable[None]]


class JobStore:
    """Persistent scheduler backed by a :class:`ConnectionManager`."""

    def __init__(self, connection: ConnectionManager = db_connection) -> None:
        self.connection = connection
        self._handlers: Dict[str, JobCallback] = {}
        self._in_flight: Set[int] = set()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def define(self, kind: str, callback: JobCallback) -> None:
        """Register the callback fired for jobs of ``kind``."""
        self._handlers[kind] = callback
        logger.debug("[JOB STORE] Registered handler for %s", kind)

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------

    async def schedule(
        self,
        when: datetime,
        kind: str,
        *,
        command_text: str,
        parameters: str | None,
        moderator: str,
        guild_id: int,
        channel_id: int,
    ) -> ScheduledJob:
        """Persist a new job and return it with its assigned id.

        ``when`` is truncated to whole seconds.
        """
        run_at = int(to_utc(when).timestamp())
        async with self.connection.transaction() as conn:
            job_id = await scheduled_job_repo.insert(
                conn,
                kind=kind,
                next_run_at=run_at,
                command_text=command_text,
                parameters=parameters,
                moderator=moderator,
                guild_id=guild_id,
                channel_id=channel_id,
            )

        logger.debug("[JOB STORE] Scheduled %s job %d at unix=%d", kind, job_id, run_at)
        return ScheduledJob(
            job_id=job_id,
            kind=kind,
            next_run_at=ScheduledJob.from_unix(run_at),
            command_text=command_text,
            parameters=parameters,
            moderator=moderator,
            guild_id=guild_id,
            channel_id=channel_id,
        )

    async def find_by_id(self, job_id: int, guild_id: int | None = None) -> List[ScheduledJob]:
        async with self.connection.read() as conn:
            return await scheduled_job_repo.find_by_id(conn, job_id, guild_id)

    async def find(
        self,
        kind: str,
        command_text: str | None = None,
        guild_id: int | None = None,
    ) -> List[ScheduledJob]:
        """Return jobs of ``kind`` (optionally one command and one guild) sorted by execution time."""
        async with self.connection.read() as conn:
            return await scheduled_job_repo.find(conn, kind, command_text, guild_id)

    async def remove(self, job: ScheduledJob) -> bool:
        """Delete ``job``. Returns False when it was already removed."""
        async with self.connection.transaction() as conn:
            removed = await scheduled_job_repo.delete(conn, job.job_id)
        logger.debug("[JOB STORE] Remove job %d -> %s", job.job_id, "removed" if removed else "already gone")
        return removed

    # ------------------------------------------------------------------
    # Runtime
    # ------------------------------------------------------------------

    async def run_due_jobs(self, now: int | None = None) -> int:
        """Fire the callback of every due job. Returns the number of jobs fired."""
        now = int(time.time()) if now is None else now

        async with self.connection.read() as conn:
            due = await scheduled_job_repo.get_due(conn, now)

        fired = 0
        for job in due:
            if job.job_id in self._in_flight:
                continue
            handler = self._handlers.get(job.kind)
            if handler is None:
                logger.warning("[JOB STORE] No handler registered for job %d of kind %s", job.job_id, job.kind)
                continue

            self._in_flight.add(job.job_id)
            try:
                await handler(job)
                fired += 1
            except Exception as exc:
                logger.error("[JOB STORE] Handler for job %d raised: %s", job.job_id, exc)
            finally:
                self._in_flight.discard(job.job_id)

        return fired


# Shared job store on the bot's database connection
job_store = JobStore()
