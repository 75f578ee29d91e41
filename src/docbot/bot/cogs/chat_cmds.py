"""
Chat cog: the ``/chat`` documentation question command.

The command defers the interaction and hands the question to the
:class:`QAOrchestrator`, which sends exactly one reply through an
:class:`InteractionResponder`.
"""

import discord
from discord import Option
from discord.ext import commands

from docbot.chat.qa_orchestrator import QAOrchestrator, create_qa_orchestrator
from docbot.configuration.app_configuration import app_config
from docbot.ui.chat_embeds import build_query_failed_embed
from docbot.util.logger import get_logger

logger = get_logger("chat_commands")


class InteractionResponder:
    """Adapts an ApplicationContext to the responder interface of the orchestrator."""

    def __init__(self, ctx: discord.ApplicationContext) -> None:
        self.ctx = ctx

    async def post_status(self, text: str):
        return await self.ctx.send_followup(content=text, wait=True)

    async def reply_text(self, text: str) -> None:
        await self.ctx.send_followup(content=text)

    async def reply_embed(self, embed: discord.Embed) -> None:
        await self.ctx.send_followup(embed=embed)


class ChatCog(commands.Cog):
    """Answers questions about the documentation."""

    def __init__(self, bot: discord.Bot, orchestrator: QAOrchestrator | None = None) -> None:
        self.bot = bot
        self._orchestrator = orchestrator
        logger.info("[CHAT CMDS] Chat cog loaded")

    @property
    def orchestrator(self) -> QAOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = create_qa_orchestrator(app_config.chat_settings)
        return self._orchestrator

    @commands.slash_command(name="chat", description="Ask a question about the documentation.")
    async def chat(
        self,
        ctx: discord.ApplicationContext,
        query: Option(str, "Your question.", required=False, default=""),
    ) -> None:
        await ctx.defer()
        try:
            orchestrator = self.orchestrator
        except Exception as exc:
            logger.error("[CHAT CMDS] Failed to build the chat pipeline: %s", exc)
            await ctx.send_followup(embed=build_query_failed_embed(app_config.chat_settings.docs_base_url))
            return

        outcome = await orchestrator.handle_chat_query(query or "", InteractionResponder(ctx))
        logger.debug(
            "[CHAT CMDS] /chat by %s finished in state %s (%s)",
            ctx.user, outcome.state, outcome.error_kind or "ok",
        )


def setup(bot: discord.Bot) -> None:
    bot.add_cog(ChatCog(bot))
