"""Query embedding through the OpenAI embeddings endpoint."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List

from openai import AsyncOpenAI

from docbot.datatypes.errors import BotError, ErrorKind
from docbot.util.logger import get_logger
from docbot.util.retry import call_with_fixed_retry

logger = get_logger("embedding_client")


class EmbeddingClient:
    """Turns query text into an embedding vector, retrying flaky provider calls.

    The provider is retried ``max_retries`` times after the first attempt
    with a fixed ``retry_delay_seconds`` cooldown between attempts.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        *,
        max_retries: int = 5,
        retry_delay_seconds: float = 2.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self.model = model
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds
        self._sleep = sleep
        self.last_attempts = 0

    async def _request(self, text: str) -> Any:
        return await self._client.embeddings.create(model=self.model, input=[text])

    async def embed(self, text: str) -> List[float]:
        """Return the embedding vector for ``text``.

        Raises:
            BotError: ``EMBEDDING_UNAVAILABLE`` when every attempt failed or the
                response carried no vector.
        """
        outcome = await call_with_fixed_retry(
            lambda: self._request(text),
            retries=self.max_retries,
            delay_seconds=self.retry_delay_seconds,
            operation_name="embedding request",
            sleep=self._sleep,
        )
        self.last_attempts = outcome.attempts

        if not outcome.succeeded:
            raise BotError(ErrorKind.EMBEDDING_UNAVAILABLE, f"{outcome.attempts} attempts failed: {outcome.error}")

        vector = _extract_vector(outcome.value)
        if not vector:
            raise BotError(ErrorKind.EMBEDDING_UNAVAILABLE, "response carried no embedding")

        logger.debug("[EMBEDDING] Embedded query after %d attempt(s) (%d dims)", outcome.attempts, len(vector))
        return vector


def _extract_vector(response: Any) -> List[float] | None:
    data = getattr(response, "data", None)
    if not data:
        return None
    embedding = getattr(data[0], "embedding", None)
    if not embedding:
        return None
    return [float(value) for value in embedding]
