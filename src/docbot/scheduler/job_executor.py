"""
Callback fired by the job store when a scheduled command is due.

The callback never raises. Each step is guarded on its own:

1. Re-read the job. If it is gone it was deleted in the meantime: skip.
2. Without a reachable mod-log channel the job is removed unexecuted.
3. A command no longer on the allow-list is audited as failed and removed.
4. Otherwise the row is removed *before* dispatch, so a job runs at most
   once, then the command runs and the outcome is audited.
"""

from __future__ import annotations

import datetime
from typing import Callable, Iterable

import discord

from docbot.datatypes.schedule_datatypes import ScheduledJob
from docbot.moderation.mod_log import ModLogSink
from docbot.moderation.schedulable_commands import resolve_command
from docbot.scheduler.job_store import JobStore
from docbot.util.logger import get_logger

logger = get_logger("job_executor")

EXECUTION_TITLE = "Scheduled Command - Execution"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ScheduledCommandExecutor:
    """Runs due ``scheduled_command_execution`` jobs against their guild."""

    def __init__(
        self,
        bot: discord.Bot,
        store: JobStore,
        mod_log: ModLogSink,
        supported_commands: Iterable[str],
        *,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        self.bot = bot
        self.store = store
        self.mod_log = mod_log
        self.supported_commands = [name.lower() for name in supported_commands]
        self.clock = clock

    async def __call__(self, job: ScheduledJob) -> None:
        try:
            matching = await self.store.find_by_id(job.job_id)
        except Exception as exc:
            logger.error("[SCHEDULER] Failed to re-read job %d: %s", job.job_id, exc)
            return

        if len(matching) != 1:
            logger.debug("[SCHEDULER] Job %d has been deleted already, skipping execution", job.job_id)
            return
        current = matching[0]

        if not self.mod_log.available:
            logger.error(
                "[SCHEDULER] Job %d (%s) will not be executed because there is no mod-log channel",
                current.job_id, current.command_text,
            )
            await self._remove(current)
            return

        command = resolve_command(current.command_text, self.supported_commands)
        if command is None:
            logger.error(
                "[SCHEDULER] Job %d not executed because command %s is not supported",
                current.job_id, current.command_text,
            )
            await self._audit(
                current,
                failure=(
                    f"The provided `{current.command_text}` command is not a supported command "
                    "for scheduling and execution is not possible."
                ),
            )
            await self._remove(current)
            return

        removed = await self._remove(current)
        if removed is False:
            logger.debug("[SCHEDULER] Job %d was removed concurrently, skipping execution", current.job_id)
            return
        if removed is None:
            await self._audit(current, failure="The job could not be removed from the store and was not executed.")
            return

        failure = await self._dispatch(command, current)
        await self._audit(current, failure=failure)

    async def _dispatch(self, command, job: ScheduledJob) -> str | None:
        """Run the command; returns a failure description or None on success."""
        guild = self.bot.get_guild(job.guild_id)
        if guild is None:
            logger.error("[SCHEDULER] Guild %s for job %d not found", job.guild_id, job.job_id)
            return f"Guild {job.guild_id} is not available."

        logger.debug("[SCHEDULER] Executing job %d with command %s", job.job_id, job.command_text)
        try:
            await command.execute(guild, job.parameters, job.moderator)
        except Exception as exc:
            logger.error("[SCHEDULER] Failed to execute job %d (%s): %s", job.job_id, job.command_text, exc)
            return f"Execution of `{job.command_text}` failed: {exc}"

        logger.info("[SCHEDULER] Executed job %d (%s)", job.job_id, job.command_text)
        return None

    async def _remove(self, job: ScheduledJob) -> bool | None:
        """Remove the job row. Returns None when the removal itself failed."""
        try:
            return await self.store.remove(job)
        except Exception as exc:
            logger.error("[SCHEDULER] Failed to delete scheduled job %d: %s", job.job_id, exc)
            return None

    async def _audit(self, job: ScheduledJob, *, failure: str | None = None) -> None:
        try:
            await self.mod_log.record(EXECUTION_TITLE, job, job.moderator, self.clock(), failure=failure)
        except Exception as exc:
            logger.warning("[SCHEDULER] Failed to send mod-log for job %d (%s): %s", job.job_id, job.command_text, exc)
