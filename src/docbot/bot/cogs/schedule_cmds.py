"""
Schedule cog: defer moderation commands with ``/schedule``.

Sub-commands:
- /schedule add <arguments>: ``<timer> <command> [parameters]``
- /schedule delete <job_id>
- /schedule list [command]
- /schedule help

Only members holding one of the configured moderator roles may use the
group (or members with Moderate Members when no roles are configured).
Jobs are scoped to the guild they were scheduled in. Responses are
ephemeral; the audit trail goes to the mod-log channel.
"""

import discord
from discord import Option
from discord.ext import commands

from docbot.configuration.app_configuration import app_config
from docbot.configuration.schedule_settings import ScheduleSettings
from docbot.datatypes.errors import BotError, ErrorKind
from docbot.moderation.mod_log import ModLogSink
from docbot.moderation.schedulable_commands import command_usages
from docbot.scheduler.job_store import job_store
from docbot.scheduler.schedule_service import ScheduleService
from docbot.ui import schedule_embeds
from docbot.util.logger import get_logger

logger = get_logger("schedule_commands")

_PARSE_ERRORS = (ErrorKind.MISSING_TIMER, ErrorKind.MISSING_COMMAND, ErrorKind.UNSUPPORTED_COMMAND)


class ScheduleCog(commands.Cog):
    """Manage the execution of moderation commands at a scheduled time."""

    schedule = discord.SlashCommandGroup("schedule", "Manage the execution of commands at a scheduled time.")

    def __init__(
        self,
        bot: discord.Bot,
        settings: ScheduleSettings | None = None,
        service: ScheduleService | None = None,
    ) -> None:
        self.bot = bot
        self.settings = settings or app_config.schedule_settings
        self.service = service or ScheduleService(job_store, self.settings.supported_commands)
        self.mod_log = ModLogSink(bot, self.settings.mod_logs_channel_id)
        logger.info("[SCHEDULE CMDS] Schedule cog loaded")

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def _is_permitted(self, member) -> bool:
        if not isinstance(member, discord.Member):
            return False
        permitted = set(self.settings.permitted_role_ids)
        if permitted:
            return any(role.id in permitted for role in member.roles)
        return member.guild_permissions.moderate_members

    async def _check_permissions(self, ctx: discord.ApplicationContext) -> bool:
        if not ctx.guild_id:
            await ctx.respond("This command can only be used in a server.", ephemeral=True)
            return False
        if not self._is_permitted(ctx.user):
            await ctx.respond(embed=schedule_embeds.build_no_permission_embed(), ephemeral=True)
            return False
        await ctx.defer(ephemeral=True)
        return True

    async def _audit(self, ctx: discord.ApplicationContext, action: str, job) -> None:
        try:
            await self.service.audit(self.mod_log, action, job, ctx.user.mention)
        except BotError as exc:
            logger.warning("[SCHEDULE CMDS] Mod-log unavailable for %s of job %d: %s", action, job.job_id, exc)
            await ctx.send_followup(
                embed=schedule_embeds.build_no_channel_embed(action, "Mod Log"),
                ephemeral=True,
            )

    # ------------------------------------------------------------------
    # Sub-commands
    # ------------------------------------------------------------------

    @schedule.command(name="add", description="Schedule a moderation command.")
    async def add(
        self,
        ctx: discord.ApplicationContext,
        arguments: Option(str, "<timer> <command> [parameters], e.g. 2h unban 123456789012345678", required=True),
    ) -> None:
        if not await self._check_permissions(ctx):
            return

        try:
            job = await self.service.add(arguments, ctx.user.mention, ctx.guild_id, ctx.channel_id)
        except BotError as exc:
            if exc.kind not in _PARSE_ERRORS:
                logger.error("[SCHEDULE CMDS] Failed to add scheduled command %r: %s", arguments, exc)
            embed = (
                schedule_embeds.build_missing_info_embed("Add", exc.detail)
                if exc.kind in _PARSE_ERRORS
                else schedule_embeds.build_failed_embed("Add", arguments)
            )
            await ctx.send_followup(embed=embed, ephemeral=True)
            return
        except Exception as exc:
            logger.error("[SCHEDULE CMDS] Failed to add scheduled command %r: %s", arguments, exc)
            await ctx.send_followup(embed=schedule_embeds.build_failed_embed("Add", arguments), ephemeral=True)
            return

        await ctx.send_followup(embed=schedule_embeds.build_success_embed("Add", job), ephemeral=True)
        await self._audit(ctx, "Add", job)

    @schedule.command(name="delete", description="Delete a scheduled command by its ID.")
    async def delete(
        self,
        ctx: discord.ApplicationContext,
        job_id: Option(int, "ID of the scheduled command (see /schedule list).", required=True),
    ) -> None:
        if not await self._check_permissions(ctx):
            return

        try:
            job = await self.service.delete(job_id, ctx.user.mention, guild_id=ctx.guild_id)
        except BotError as exc:
            if exc.kind is not ErrorKind.NOT_FOUND:
                logger.error("[SCHEDULE CMDS] Failed to delete scheduled job %s: %s", job_id, exc)
            embed = (
                schedule_embeds.build_missing_info_embed("Delete", exc.detail)
                if exc.kind is ErrorKind.NOT_FOUND
                else schedule_embeds.build_failed_embed("Delete", str(job_id))
            )
            await ctx.send_followup(embed=embed, ephemeral=True)
            return
        except Exception as exc:
            logger.error("[SCHEDULE CMDS] Failed to delete scheduled job %s: %s", job_id, exc)
            await ctx.send_followup(embed=schedule_embeds.build_failed_embed("Delete", str(job_id)), ephemeral=True)
            return

        await ctx.send_followup(embed=schedule_embeds.build_success_embed("Delete", job), ephemeral=True)
        await self._audit(ctx, "Delete", job)

    @schedule.command(name="list", description="List scheduled commands.")
    async def list_jobs(
        self,
        ctx: discord.ApplicationContext,
        command: Option(str, "Only list this command.", required=False, default=None),
    ) -> None:
        if not await self._check_permissions(ctx):
            return

        try:
            jobs = await self.service.list(command, guild_id=ctx.guild_id)
        except Exception as exc:
            logger.error("[SCHEDULE CMDS] Failed to list scheduled commands (%s): %s", command or "all", exc)
            await ctx.send_followup(embed=schedule_embeds.build_failed_embed("List", command or "all"), ephemeral=True)
            return

        await ctx.send_followup(embed=schedule_embeds.build_list_embed(jobs), ephemeral=True)

    @schedule.command(name="help", description="Explain the schedule command.")
    async def help(self, ctx: discord.ApplicationContext) -> None:
        if not await self._check_permissions(ctx):
            return

        embed = schedule_embeds.build_help_embed()
        schedule_embeds.add_command_usage(embed, command_usages(self.settings.supported_commands))
        await ctx.send_followup(embed=embed, ephemeral=True)


def setup(bot: discord.Bot) -> None:
    bot.add_cog(ScheduleCog(bot))
