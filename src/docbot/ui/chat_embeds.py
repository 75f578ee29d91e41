"""
Embeds shown by the documentation chat command.
"""

import discord

PROFANITY_WARNING = "Please do not use profane language with this command."
PROCESSING_MESSAGE = "Processing... Please stand by."


def build_documentation_embed(docs_base_url: str) -> discord.Embed:
    """Embed pointing to the documentation, used when no question was given."""
    return discord.Embed(
        title="FlyByWire Chat Bot - Documentation",
        description=f"Find the full [FlyByWire Documentation here]({docs_base_url}).",
        color=discord.Color.blue(),
    )


def build_query_failed_embed(docs_base_url: str) -> discord.Embed:
    """Embed shown when the query could not be processed at all."""
    return discord.Embed(
        title="FlyByWire Chat Bot - Query failed",
        description=(
            f"The query failed, please check the full [FlyByWire Documentation here]({docs_base_url}) "
            "and use the regular search functionality."
        ),
        color=discord.Color.orange(),
    )


def build_url_rejected_embed() -> discord.Embed:
    """Embed shown when the question contained a link."""
    return discord.Embed(
        title="FlyByWire Documentation | Error",
        description="Providing URLs to the Documentation search command is not allowed.",
        color=discord.Color.red(),
    )
