"""
Moderation commands that may be run later through ``/schedule``.

The registry is closed: :data:`SCHEDULABLE_COMMANDS` maps each command name
to one :class:`SchedulableCommand`. Every command parses its own parameter
string and applies the action to a guild:

    ban        <user_id> [reason]
    unban      <user_id> [reason]
    timeout    <user_id> <minutes> [reason]
    untimeout  <user_id> [reason]
    slowmode   <channel_id> <seconds>
    warn       <user_id> [reason]

User and channel ids may be given as raw snowflakes or as mentions.
"""

from __future__ import annotations

import datetime
import re
from typing import Dict, Iterable, List, Tuple

import discord

from docbot.ui.schedule_embeds import build_warning_embed
from docbot.util.logger import get_logger

logger = get_logger("schedulable_commands")

# Discord limits
MAX_TIMEOUT_MINUTES = 28 * 24 * 60
MAX_SLOWMODE_SECONDS = 6 * 60 * 60

_SNOWFLAKE_PATTERN = re.compile(r"^<?[@#]?!?(\d{15,20})>?$")


class CommandParameterError(ValueError):
    """Raised when a scheduled command's parameter string cannot be parsed."""


def parse_snowflake(token: str) -> int:
    """Return the id in a raw snowflake or a user/channel mention."""
    match = _SNOWFLAKE_PATTERN.match(token.strip())
    if not match:
        raise CommandParameterError(f"`{token}` is not a valid id or mention")
    return int(match.group(1))


def split_parameters(parameters: str | None, required: int) -> Tuple[List[str], str | None]:
    """Split off ``required`` leading tokens; the rest is returned verbatim as the reason."""
    tokens = (parameters or "").split(maxsplit=required)
    if len(tokens) < required:
        raise CommandParameterError(f"expected at least {required} parameter(s), got {len(tokens)}")
    reason = tokens[required].strip() if len(tokens) > required else None
    return tokens[:required], reason or None


def _audit_reason(reason: str | None, moderator: str) -> str:
    return f"Scheduled by {moderator}: {reason}" if reason else f"Scheduled by {moderator}"


async def _resolve_member(guild: discord.Guild, user_id: int) -> discord.Member:
    member = guild.get_member(user_id)
    if member is None:
        member = await guild.fetch_member(user_id)
    return member


class SchedulableCommand:
    """Base class for a command that can be executed from a scheduled job."""

    name: str = ""
    usage: str = ""

    async def execute(self, guild: discord.Guild, parameters: str | None, moderator: str) -> None:
        raise NotImplementedError


class BanCommand(SchedulableCommand):
    name = "ban"
    usage = "<user_id> [reason]"

    async def execute(self, guild, parameters, moderator):
        (target,), reason = split_parameters(parameters, 1)
        user_id = parse_snowflake(target)
        await guild.ban(discord.Object(id=user_id), reason=_audit_reason(reason, moderator))
        logger.info("[SCHEDULED BAN] Banned %s in guild %s", user_id, guild.id)


class UnbanCommand(SchedulableCommand):
    name = "unban"
    usage = "<user_id> [reason]"

    async def execute(self, guild, parameters, moderator):
        (target,), reason = split_parameters(parameters, 1)
        user_id = parse_snowflake(target)
        await guild.unban(discord.Object(id=user_id), reason=_audit_reason(reason, moderator))
        logger.info("[SCHEDULED UNBAN] Unbanned %s in guild %s", user_id, guild.id)


class TimeoutCommand(SchedulableCommand):
    name = "timeout"
    usage = "<user_id> <minutes> [reason]"

    async def execute(self, guild, parameters, moderator):
        (target, minutes_text), reason = split_parameters(parameters, 2)
        user_id = parse_snowflake(target)
        try:
            minutes = int(minutes_text)
        except ValueError as exc:
            raise CommandParameterError(f"`{minutes_text}` is not a number of minutes") from exc
        if minutes <= 0:
            raise CommandParameterError("timeout duration must be positive")
        minutes = min(minutes, MAX_TIMEOUT_MINUTES)

        member = await _resolve_member(guild, user_id)
        until = discord.utils.utcnow() + datetime.timedelta(minutes=minutes)
        await member.timeout(until, reason=_audit_reason(reason, moderator))
        logger.info("[SCHEDULED TIMEOUT] Timed out %s for %d minutes in guild %s", user_id, minutes, guild.id)


class UntimeoutCommand(SchedulableCommand):
    name = "untimeout"
    usage = "<user_id> [reason]"

    async def execute(self, guild, parameters, moderator):
        (target,), reason = split_parameters(parameters, 1)
        user_id = parse_snowflake(target)
        member = await _resolve_member(guild, user_id)
        await member.remove_timeout(reason=_audit_reason(reason, moderator))
        logger.info("[SCHEDULED UNTIMEOUT] Removed timeout of %s in guild %s", user_id, guild.id)


class SlowmodeCommand(SchedulableCommand):
    name = "slowmode"
    usage = "<channel_id> <seconds>"

    async def execute(self, guild, parameters, moderator):
        (target, seconds_text), _ = split_parameters(parameters, 2)
        channel_id = parse_snowflake(target)
        try:
            seconds = int(seconds_text)
        except ValueError as exc:
            raise CommandParameterError(f"`{seconds_text}` is not a number of seconds") from exc
        if not 0 <= seconds <= MAX_SLOWMODE_SECONDS:
            raise CommandParameterError(f"slowmode must be between 0 and {MAX_SLOWMODE_SECONDS} seconds")

        channel = guild.get_channel(channel_id)
        if channel is None:
            raise CommandParameterError(f"channel {channel_id} not found")
        await channel.edit(slowmode_delay=seconds, reason=_audit_reason(None, moderator))
        logger.info("[SCHEDULED SLOWMODE] Set slowmode of %s to %ds in guild %s", channel_id, seconds, guild.id)


class WarnCommand(SchedulableCommand):
    name = "warn"
    usage = "<user_id> [reason]"

    async def execute(self, guild, parameters, moderator):
        (target,), reason = split_parameters(parameters, 1)
        user_id = parse_snowflake(target)
        member = await _resolve_member(guild, user_id)
        embed = build_warning_embed(guild.name, reason or "No reason provided.", moderator)
        await member.send(embed=embed)
        logger.info("[SCHEDULED WARN] Warned %s in guild %s", user_id, guild.id)


SCHEDULABLE_COMMANDS: Dict[str, SchedulableCommand] = {
    command.name: command
    for command in (
        BanCommand(),
        SlowmodeCommand(),
        TimeoutCommand(),
        UnbanCommand(),
        UntimeoutCommand(),
        WarnCommand(),
    )
}


def resolve_command(name: str, allowed: Iterable[str] | None = None) -> SchedulableCommand | None:
    """Look up ``name`` in the registry, restricted to ``allowed`` when given."""
    key = name.lower()
    if allowed is not None and key not in {entry.lower() for entry in allowed}:
        return None
    return SCHEDULABLE_COMMANDS.get(key)


def command_usages(allowed: Iterable[str] | None = None) -> List[Tuple[str, str]]:
    """``(name, usage)`` for every schedulable command, restricted to ``allowed`` when given."""
    names = sorted(SCHEDULABLE_COMMANDS) if allowed is None else sorted(
        name for name in {entry.lower() for entry in allowed} if name in SCHEDULABLE_COMMANDS
    )
    return [(name, SCHEDULABLE_COMMANDS[name].usage) for name in names]
