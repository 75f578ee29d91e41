"""
Embeds for the ``/schedule`` command group and its mod-log audit trail.
"""

from __future__ import annotations

import datetime
from typing import List, Sequence, Tuple

import discord

from docbot.datatypes.schedule_datatypes import ScheduledJob
from docbot.util.format_utils import humanize_timestamp

# Discord allows at most 25 fields per embed; each job takes five.
FIELDS_PER_JOB = 5
MAX_LISTED_JOBS = 25 // FIELDS_PER_JOB

EmbedField = Tuple[str, str, bool]


def build_help_embed() -> discord.Embed:
    """Usage of the timer format and every ``/schedule`` sub-command."""
    embed = discord.Embed(
        title="Schedule commands - Help",
        description="A command to manage the execution of other commands at a specific schedule.",
        color=discord.Color.blue(),
    )
    embed.add_field(
        name="Timer parameter",
        value=(
            "In what time to execute the command, from the current moment. It needs to be provided "
            "with an indication like s, m, h or d. Which respectively stand for seconds, minutes, "
            "hours or days."
        ),
        inline=False,
    )
    embed.add_field(
        name="Command parameter",
        value="The command to execute, for instance `warn`.",
        inline=False,
    )
    embed.add_field(
        name="Options parameter",
        value="The options that the command expects, see the command list below.",
        inline=False,
    )
    embed.add_field(
        name="Scheduling a command: `/schedule add <timer> <command> [options]`",
        value="Schedule the execution of a specific command with the provided options after the timer has expired.",
        inline=False,
    )
    embed.add_field(
        name="Delete a scheduled command: `/schedule delete <ID>`",
        value="Delete a scheduled command based on its ID, which can be found with the list command.",
        inline=False,
    )
    embed.add_field(
        name="List scheduled commands: `/schedule list [command]`",
        value="List the scheduled commands, if a command is specified it will only list the ones matching the command.",
        inline=False,
    )
    return embed


def add_command_usage(embed: discord.Embed, usages: Sequence[Tuple[str, str]]) -> discord.Embed:
    """Append one line per schedulable command (``name``, ``usage``) to ``embed``."""
    if usages:
        lines = "\n".join(f"`{name} {usage}`" for name, usage in usages)
        embed.add_field(name="Schedulable commands", value=lines, inline=False)
    return embed


def build_failed_embed(action: str, info: str) -> discord.Embed:
    return discord.Embed(
        title=f"Schedule Command - {action} failed",
        description=f"Failed to {action.lower()} a scheduled command (`{info}`).",
        color=discord.Color.red(),
    )


def build_missing_info_embed(action: str, information: str) -> discord.Embed:
    return discord.Embed(
        title=f"Schedule Command - {action} - missing information",
        description=information,
        color=discord.Color.red(),
    )


def build_no_channel_embed(action: str, channel_name: str) -> discord.Embed:
    """Secondary notice: the action succeeded but the audit message could not be posted."""
    return discord.Embed(
        title=f"Schedule Command - {action} - No {channel_name} channel",
        description=(
            f"The command was successful, but no message to {channel_name} was sent. "
            "Please check the channel still exists."
        ),
        color=discord.Color.gold(),
    )


def build_no_permission_embed() -> discord.Embed:
    return discord.Embed(
        title="Schedule Command - Permission missing",
        description="You do not have permission to use this command.",
        color=discord.Color.red(),
    )


def build_success_embed(action: str, job: ScheduledJob) -> discord.Embed:
    """Ephemeral confirmation for the moderator who ran add or delete."""
    embed = discord.Embed(
        title=f"Schedule Command - {action}",
        color=discord.Color.green(),
    )
    for name, value, inline in scheduled_job_fields(job, job.moderator, job.next_run_at):
        embed.add_field(name=name, value=value, inline=inline)
    return embed


def scheduled_job_fields(
    job: ScheduledJob,
    moderator: str,
    execution_time: datetime.datetime,
) -> List[EmbedField]:
    """The five audit fields describing a job: ID, command, parameters, time, moderator."""
    return [
        ("ID", str(job.job_id), True),
        ("Command", job.command_text, True),
        ("Parameters", job.parameters or "-", True),
        ("Execution time", humanize_timestamp(execution_time), True),
        ("Moderator", moderator, True),
    ]


def build_list_embed(jobs: Sequence[ScheduledJob]) -> discord.Embed:
    """List of scheduled jobs, soonest first, truncated to what fits in one embed."""
    description = f"List of {len(jobs)} Scheduled Commands matching the search."
    if len(jobs) > MAX_LISTED_JOBS:
        description += f" Showing the first {MAX_LISTED_JOBS}."

    embed = discord.Embed(
        title="Schedule Commands - List",
        description=description,
        color=discord.Color.blue(),
    )
    for job in jobs[:MAX_LISTED_JOBS]:
        for name, value, inline in scheduled_job_fields(job, job.moderator, job.next_run_at):
            embed.add_field(name=name, value=value, inline=inline)
    return embed


def build_audit_embed(
    title: str,
    job: ScheduledJob,
    moderator: str,
    execution_time: datetime.datetime,
    *,
    failure: str | None = None,
) -> discord.Embed:
    """Mod-log record for an add, delete or execution of a scheduled job."""
    embed = discord.Embed(
        title=title,
        color=discord.Color.red() if failure else discord.Color.green(),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    for name, value, inline in scheduled_job_fields(job, moderator, execution_time):
        embed.add_field(name=name, value=value, inline=inline)
    if failure:
        embed.add_field(name="Failed Execution", value=failure, inline=False)
    return embed


def build_warning_embed(guild_name: str, reason: str, moderator: str) -> discord.Embed:
    """Direct message sent to a member by the scheduled ``warn`` command."""
    embed = discord.Embed(
        title="⚠️ Warning Issued",
        color=discord.Color.gold(),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    embed.add_field(name="Reason", value=reason, inline=False)
    embed.add_field(name="Moderator", value=moderator, inline=True)
    embed.set_footer(text=f"Guild: {guild_name}")
    return embed
