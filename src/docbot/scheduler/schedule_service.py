"""
Add, delete and list deferred moderation commands.

``add`` parses ``<timer> <command> [parameters]``:

- the timer is an integer followed by ``s``, ``m``, ``h`` or ``d``
  (case-insensitive);
- the command must be a schedulable command on the configured allow-list;
- everything after the command is stored verbatim as the parameter string.

The job is due at ``now + timer``. Parse failures raise :class:`BotError`
before anything is written.
"""

from __future__ import annotations

import datetime
import re
from typing import Callable, Iterable, List

from docbot.datatypes.errors import BotError, ErrorKind
from docbot.datatypes.schedule_datatypes import SCHEDULED_COMMAND_KIND, ScheduledJob, TimeUnit
from docbot.moderation.mod_log import ModLogSink
from docbot.moderation.schedulable_commands import resolve_command
from docbot.scheduler.job_store import JobStore
from docbot.util.format_utils import format_duration
from docbot.util.logger import get_logger

logger = get_logger("schedule_service")

_TIMER_PATTERN = re.compile(r"^(\d+[smhd])", re.IGNORECASE)
_COMMAND_PATTERN = re.compile(r"^(\w+)")
_DURATION_PATTERN = re.compile(r"^(\d+)([a-z]?)$")

_SUFFIX_UNITS = {
    "s": TimeUnit.SECONDS,
    "m": TimeUnit.MINUTES,
    "h": TimeUnit.HOURS,
    "d": TimeUnit.DAYS,
}


def parse_duration_ms(timer: str) -> int:
    """Convert a timer token such as ``30s`` or ``2h`` to milliseconds.

    A token without a recognised unit letter (e.g. a bare ``7``) is treated
    as minutes.
    """
    match = _DURATION_PATTERN.match(timer.strip().lower())
    if not match:
        raise BotError(ErrorKind.MISSING_TIMER, f"invalid timer `{timer}`")
    amount, suffix = int(match.group(1)), match.group(2)
    unit = _SUFFIX_UNITS.get(suffix, TimeUnit.MINUTES)
    return amount * unit.value


def parse_add_arguments(raw_args: str) -> tuple[str, str, str | None]:
    """Split raw ``add`` input into ``(timer, command, parameters)``."""
    text = (raw_args or "").strip()

    timer_match = _TIMER_PATTERN.match(text)
    if not timer_match:
        raise BotError(ErrorKind.MISSING_TIMER, "You must provide a timer.")
    timer = timer_match.group(1).lower()
    text = text[timer_match.end():].strip()

    command_match = _COMMAND_PATTERN.match(text)
    if not command_match:
        raise BotError(ErrorKind.MISSING_COMMAND, "You must provide a command.")
    command_text = command_match.group(1).lower()
    parameters = text[command_match.end():].strip()

    return timer, command_text, parameters or None


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ScheduleService:
    """User-facing schedule operations on top of a :class:`JobStore`."""

    def __init__(
        self,
        store: JobStore,
        supported_commands: Iterable[str],
        *,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.supported_commands = [name.lower() for name in supported_commands]
        self.clock = clock

    async def add(self, raw_args: str, moderator: str, guild_id: int, channel_id: int) -> ScheduledJob:
        """Parse ``raw_args`` and persist a new scheduled command."""
        timer, command_text, parameters = parse_add_arguments(raw_args)

        if resolve_command(command_text, self.supported_commands) is None:
            raise BotError(
                ErrorKind.UNSUPPORTED_COMMAND,
                f"The provided `{command_text}` command is not a supported command for scheduling.",
            )

        delay_ms = parse_duration_ms(timer)
        run_at = self.clock() + datetime.timedelta(milliseconds=delay_ms)
        job = await self.store.schedule(
            run_at,
            SCHEDULED_COMMAND_KIND,
            command_text=command_text,
            parameters=parameters,
            moderator=moderator,
            guild_id=guild_id,
            channel_id=channel_id,
        )
        logger.info(
            "[SCHEDULER] %s scheduled %s (job %d) in %s",
            moderator, command_text, job.job_id, format_duration(delay_ms // 1000),
        )
        return job

    async def delete(self, job_id: int, moderator: str, guild_id: int | None = None) -> ScheduledJob:
        """Remove one job by id and return it as it was stored.

        With ``guild_id`` set, jobs scheduled in other guilds are reported as
        not found.
        """
        matching = await self.store.find_by_id(job_id, guild_id)
        if len(matching) > 1:
            logger.error("[SCHEDULER] %d rows share job id %d", len(matching), job_id)
        if len(matching) != 1:
            raise BotError(ErrorKind.NOT_FOUND, f"Scheduled command with `{job_id}` can not be found.")

        job = matching[0]
        if not await self.store.remove(job):
            # The executor consumed it between the read and the removal
            raise BotError(ErrorKind.NOT_FOUND, f"Scheduled command with `{job_id}` can not be found.")

        logger.info("[SCHEDULER] %s deleted job %d (%s)", moderator, job.job_id, job.command_text)
        return job

    async def list(self, command_filter: str | None = None, guild_id: int | None = None) -> List[ScheduledJob]:
        """Scheduled commands, optionally only one command name and one guild, soonest first."""
        command_text = command_filter.strip().lower() if command_filter and command_filter.strip() else None
        return await self.store.find(SCHEDULED_COMMAND_KIND, command_text, guild_id)

    @staticmethod
    async def audit(sink: ModLogSink, action: str, job: ScheduledJob, moderator: str) -> None:
        """Record an add or delete in the mod-log. Raises ``BotError(CHANNEL_UNAVAILABLE)``."""
        await sink.record(f"Schedule Command - {action}", job, moderator, job.next_run_at)
