"""
Runtime for the scheduled job store.

Design
------
- Jobs are rows in the ``scheduled_jobs`` SQLite table, so bot restarts
  are transparent: overdue jobs fire on the first poll after startup.
- A ``tasks.loop`` polls every ``poll_interval_seconds`` and hands each due
  job to the callback registered for its kind.
- The :class:`ScheduledCommandExecutor` is registered for
  ``scheduled_command_execution`` when the cog is created.
"""

from __future__ import annotations

import asyncio

import discord
from discord.ext import commands, tasks

from docbot.configuration.app_configuration import app_config
from docbot.configuration.schedule_settings import ScheduleSettings
from docbot.datatypes.schedule_datatypes import SCHEDULED_COMMAND_KIND
from docbot.moderation.mod_log import ModLogSink
from docbot.scheduler.job_executor import ScheduledCommandExecutor
from docbot.scheduler.job_store import JobStore, job_store
from docbot.util.logger import get_logger

logger = get_logger("scheduler_runtime")


class SchedulerRuntimeCog(commands.Cog):
    """Polls the job store and fires due jobs in execution-time order."""

    def __init__(
        self,
        bot: discord.Bot,
        store: JobStore = job_store,
        settings: ScheduleSettings | None = None,
    ) -> None:
        self.bot = bot
        self.store = store
        self.settings = settings or app_config.schedule_settings
        self.executor = ScheduledCommandExecutor(
            bot,
            store,
            ModLogSink(bot, self.settings.mod_logs_channel_id),
            self.settings.supported_commands,
        )
        store.define(SCHEDULED_COMMAND_KIND, self.executor)

    # ------------------------------------------------------------------
    # Cog lifecycle
    # ------------------------------------------------------------------

    @commands.Cog.listener()
    async def on_ready(self) -> None:
        interval = self.settings.poll_interval_seconds
        self._poll_task.change_interval(seconds=interval)
        if not self._poll_task.is_running():
            self._poll_task.start()
        logger.info("[SCHEDULER] Ready (poll interval=%.1fs)", interval)

    def cog_unload(self) -> None:
        self._poll_task.cancel()
        logger.info("[SCHEDULER] Stopped")

    # ------------------------------------------------------------------
    # Polling loop
    # ------------------------------------------------------------------

    @tasks.loop(seconds=5)  # real interval set in on_ready
    async def _poll_task(self) -> None:
        try:
            fired = await self.store.run_due_jobs()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error("[SCHEDULER] Polling the job store failed: %s", exc)
            return
        if fired:
            logger.debug("[SCHEDULER] Fired %d due job(s)", fired)

    @_poll_task.before_loop
    async def _before_poll(self) -> None:
        await self.bot.wait_until_ready()


def setup(bot: discord.Bot) -> None:
    bot.add_cog(SchedulerRuntimeCog(bot))
