"""
End-to-end orchestration of the documentation chat command.

Pipeline: guard → embed → retrieve → assemble → generate → reply.

Every invocation ends in exactly one reply to the user. A temporary
"processing" status message is posted before the first provider call and
removed again on every exit path; failing to remove it is only logged.

The orchestrator talks to Discord through a *responder*, any object with
these coroutines:

- ``post_status(text)`` returning a message-like object with ``delete()``
- ``reply_text(text)``
- ``reply_embed(embed)``
"""

from __future__ import annotations

from typing import Any

from docbot.chat.answer_generator import AnswerGenerator, build_fallback_answer
from docbot.chat.clients import get_openai_client, get_vector_index
from docbot.chat.context_assembler import assemble_context
from docbot.chat.embedding_client import EmbeddingClient
from docbot.chat.query_guard import QueryGuard
from docbot.chat.vector_retriever import VectorRetriever
from docbot.configuration.chat_settings import ChatSettings
from docbot.datatypes.chat_datatypes import ChatOutcome, ChatQuery, ChatState, NoContext
from docbot.datatypes.errors import BotError, ErrorKind
from docbot.ui import chat_embeds
from docbot.util.logger import get_logger

logger = get_logger("qa_orchestrator")


class QAOrchestrator:
    """Coordinates the chat pipeline and maps each failure to a user reply."""

    def __init__(
        self,
        guard: QueryGuard,
        embedder: EmbeddingClient,
        retriever: VectorRetriever,
        generator: AnswerGenerator,
        *,
        min_score: float,
        max_context_chars: int,
        docs_base_url: str,
    ) -> None:
        self.guard = guard
        self.embedder = embedder
        self.retriever = retriever
        self.generator = generator
        self.min_score = min_score
        self.max_context_chars = max_context_chars
        self.docs_base_url = docs_base_url

    @property
    def fallback_answer(self) -> str:
        return self.generator.fallback_answer

    async def handle_chat_query(self, raw_text: str, responder: Any) -> ChatOutcome:
        """Answer ``raw_text`` and send the reply through ``responder``."""
        query = ChatQuery.from_text(raw_text)

        if query.is_empty:
            await self._send(responder.reply_embed(chat_embeds.build_documentation_embed(self.docs_base_url)))
            return ChatOutcome(state=ChatState.REPLYING)

        try:
            self.guard.check(query.search_words)
        except BotError as exc:
            if exc.kind is ErrorKind.UNSAFE_INPUT:
                await self._send(responder.reply_embed(chat_embeds.build_url_rejected_embed()))
            else:
                await self._send(responder.reply_text(chat_embeds.PROFANITY_WARNING))
            return ChatOutcome(state=ChatState.FAILED, error_kind=exc.kind)

        status = await self._post_status(responder)
        try:
            outcome = await self.answer(query)
        finally:
            await self._delete_status(status)

        if outcome.error_kind is ErrorKind.EMBEDDING_UNAVAILABLE:
            await self._send(responder.reply_embed(chat_embeds.build_query_failed_embed(self.docs_base_url)))
        else:
            await self._send(responder.reply_text(outcome.reply or self.fallback_answer))
        return outcome

    async def answer(self, query: ChatQuery) -> ChatOutcome:
        """Run the network phase of the pipeline and return its terminal outcome.

        Never raises: provider failures become ``FAILED`` outcomes whose reply
        is the canonical fallback sentence.
        """
        state = ChatState.EMBEDDING
        try:
            vector = await self.embedder.embed(query.search_query)

            state = ChatState.RETRIEVING
            matches = await self.retriever.query(vector)

            state = ChatState.ASSEMBLING
            context = assemble_context(matches, self.min_score, self.max_context_chars)
            if isinstance(context, NoContext):
                logger.info(
                    "[CHAT] No context above %.3f (highest score: %s)",
                    self.min_score, context.highest_score,
                )
                return self._failed(ErrorKind.NO_RELEVANT_CONTEXT, highest_score=context.highest_score)

            state = ChatState.GENERATING
            answer = await self.generator.generate(query.search_query, context)
        except BotError as exc:
            logger.warning("[CHAT] Query failed while %s: %s", state, exc)
            return self._failed(exc.kind)
        except Exception as exc:
            logger.exception("[CHAT] Unexpected error while %s: %s", state, exc)
            return self._failed(ErrorKind.GENERATION_FAILED)

        logger.debug(
            "[CHAT] Average confidence: %.3f - Number of Contexts: %d - Prompt tokens: %d - "
            "Completion tokens: %d - Total tokens: %d",
            context.average_score, context.count,
            answer.prompt_tokens, answer.completion_tokens, answer.total_tokens,
        )
        return ChatOutcome(
            state=ChatState.REPLYING,
            reply=answer.text,
            context_count=context.count,
            average_score=context.average_score,
        )

    def _failed(self, kind: ErrorKind, highest_score: float | None = None) -> ChatOutcome:
        reply = None if kind is ErrorKind.EMBEDDING_UNAVAILABLE else self.fallback_answer
        return ChatOutcome(state=ChatState.FAILED, reply=reply, error_kind=kind, highest_score=highest_score)

    async def _post_status(self, responder: Any) -> Any:
        try:
            return await responder.post_status(chat_embeds.PROCESSING_MESSAGE)
        except Exception as exc:
            logger.debug("[CHAT] Could not post status message: %s", exc)
            return None

    async def _delete_status(self, status: Any) -> None:
        if status is None:
            return
        try:
            await status.delete()
        except Exception as exc:
            logger.debug("[CHAT] Could not delete status message: %s", exc)

    async def _send(self, reply: Any) -> None:
        try:
            await reply
        except Exception as exc:
            logger.error("[CHAT] Failed to send reply: %s", exc)


def create_qa_orchestrator(settings: ChatSettings) -> QAOrchestrator:
    """Wire a QAOrchestrator to the shared provider clients using ``settings``."""
    openai_client = get_openai_client(settings)
    return QAOrchestrator(
        guard=QueryGuard(settings.blocked_words),
        embedder=EmbeddingClient(
            openai_client,
            settings.embedding_model,
            max_retries=settings.embedding_max_retries,
            retry_delay_seconds=settings.embedding_retry_delay_seconds,
        ),
        retriever=VectorRetriever(
            get_vector_index(settings),
            top_k=settings.vector_results,
            namespace=settings.pinecone_namespace,
        ),
        generator=AnswerGenerator(
            openai_client,
            settings.completion_model,
            fallback_answer=build_fallback_answer(settings.docs_base_url),
            mode=settings.completion_mode,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        ),
        min_score=settings.min_vector_score,
        max_context_chars=settings.max_context_chars,
        docs_base_url=settings.docs_base_url,
    )
