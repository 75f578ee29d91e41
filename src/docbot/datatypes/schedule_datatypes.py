"""
Data structures for deferred moderation commands.

A :class:`ScheduledJob` mirrors one row of the ``scheduled_jobs`` table.
Rows are immutable once written; they only ever disappear, either through
``/schedule delete`` or when the job executor consumes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

# Job kind used for every row written by the schedule command
SCHEDULED_COMMAND_KIND = "scheduled_command_execution"


class TimeUnit(Enum):
    """Timer suffixes accepted by ``/schedule add`` and their length in milliseconds."""

    SECONDS = 1000
    MINUTES = 60 * 1000
    HOURS = 60 * 60 * 1000
    DAYS = 24 * 60 * 60 * 1000


@dataclass(frozen=True, slots=True)
class ScheduledJob:
    """A persisted deferred command.

    Attributes:
        job_id: Store-assigned identifier.
        kind: Job kind (always ``SCHEDULED_COMMAND_KIND`` for schedule commands).
        next_run_at: When the job is due (aware UTC).
        command_text: Name of the schedulable command.
        parameters: Raw parameter string passed to the command, if any.
        moderator: Mention of the moderator who scheduled the job.
        guild_id: Guild the job was scheduled in.
        channel_id: Channel the job was scheduled from.
    """
    job_id: int
    kind: str
    next_run_at: datetime
    command_text: str
    parameters: str | None
    moderator: str
    guild_id: int
    channel_id: int

    @property
    def run_at_unix(self) -> int:
        return int(self.next_run_at.timestamp())

    @staticmethod
    def from_unix(value: int) -> datetime:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
