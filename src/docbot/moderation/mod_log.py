"""
Moderation-log sink for scheduled command audit records.

Every schedule add, delete and execution is recorded as an embed in the
configured mod-log channel. A missing or unwritable channel raises
``BotError(CHANNEL_UNAVAILABLE)``; callers decide whether that is only a
secondary notice (add/delete) or a reason not to run a job (executor).
"""

from __future__ import annotations

import datetime

import discord

from docbot.datatypes.errors import BotError, ErrorKind
from docbot.datatypes.schedule_datatypes import ScheduledJob
from docbot.ui.schedule_embeds import build_audit_embed
from docbot.util.logger import get_logger

logger = get_logger("mod_log")


class ModLogSink:
    """Resolves the mod-log channel through the bot and posts audit embeds to it."""

    def __init__(self, bot: discord.Bot, channel_id: int | None) -> None:
        self.bot = bot
        self.channel_id = channel_id

    @property
    def channel(self):
        if not self.channel_id:
            return None
        return self.bot.get_channel(self.channel_id)

    @property
    def available(self) -> bool:
        return self.channel is not None

    async def record(
        self,
        title: str,
        job: ScheduledJob,
        moderator: str,
        execution_time: datetime.datetime,
        *,
        failure: str | None = None,
    ) -> None:
        """Post one audit embed. Raises ``BotError(CHANNEL_UNAVAILABLE)`` when it cannot."""
        channel = self.channel
        if channel is None:
            raise BotError(ErrorKind.CHANNEL_UNAVAILABLE, f"mod-log channel {self.channel_id} not found")

        embed = build_audit_embed(title, job, moderator, execution_time, failure=failure)
        try:
            await channel.send(embed=embed)
        except discord.HTTPException as exc:
            raise BotError(ErrorKind.CHANNEL_UNAVAILABLE, str(exc)) from exc

        logger.debug("[MOD LOG] %s recorded for job %d", title, job.job_id)
