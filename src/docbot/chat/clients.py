"""
Process-wide provider clients.

The OpenAI and Pinecone clients hold connection pools, so they are built
once on first use and shared by every chat invocation.
"""

from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI
from pinecone import Pinecone

from docbot.configuration.chat_settings import ChatSettings
from docbot.util.logger import get_logger

logger = get_logger("provider_clients")

_openai_client: AsyncOpenAI | None = None
_pinecone_index: Any = None


def get_openai_client(settings: ChatSettings) -> AsyncOpenAI:
    """Return the shared AsyncOpenAI client, creating it on first call."""
    global _openai_client
    if _openai_client is None:
        _openai_client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
        )
        logger.info("[CLIENTS] OpenAI client initialized (base_url=%s)", settings.openai_base_url or "default")
    return _openai_client


def get_vector_index(settings: ChatSettings) -> Any:
    """Return the shared Pinecone index handle, creating it on first call."""
    global _pinecone_index
    if _pinecone_index is None:
        client = Pinecone(api_key=settings.pinecone_api_key)
        _pinecone_index = client.Index(settings.pinecone_index_name)
        logger.info("[CLIENTS] Pinecone index %s initialized", settings.pinecone_index_name)
    return _pinecone_index


async def close_clients() -> None:
    """Close the shared clients at shutdown."""
    global _openai_client, _pinecone_index
    if _openai_client is not None:
        try:
            await _openai_client.close()
        except Exception as exc:
            logger.warning("[CLIENTS] Failed to close OpenAI client: %s", exc)
    _openai_client = None
    _pinecone_index = None
