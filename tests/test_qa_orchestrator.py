from unittest.mock import AsyncMock, MagicMock

import pytest

from docbot.chat.answer_generator import build_fallback_answer
from docbot.chat.qa_orchestrator import QAOrchestrator
from docbot.chat.query_guard import QueryGuard
from docbot.datatypes.chat_datatypes import Answer, ChatState, RetrievalMatch
from docbot.datatypes.errors import BotError, ErrorKind
from docbot.ui import chat_embeds

DOCS = "https://docs.example.com"
FALLBACK = build_fallback_answer(DOCS)


class FakeResponder:
    def __init__(self, delete_error: Exception | None = None) -> None:
        self.status_message = MagicMock()
        self.status_message.delete = AsyncMock(side_effect=delete_error)
        self.statuses: list[str] = []
        self.texts: list[str] = []
        self.embeds: list = []

    async def post_status(self, text):
        self.statuses.append(text)
        return self.status_message

    async def reply_text(self, text):
        self.texts.append(text)

    async def reply_embed(self, embed):
        self.embeds.append(embed)

    @property
    def reply_count(self) -> int:
        return len(self.texts) + len(self.embeds)


def _orchestrator(matches=None, answer_text="Press AP1. For more information, see <https://docs.example.com/ap>"):
    embedder = MagicMock()
    embedder.embed = AsyncMock(return_value=[0.1, 0.2])
    retriever = MagicMock()
    retriever.query = AsyncMock(return_value=matches if matches is not None else [
        RetrievalMatch(score=0.9, text="Press the AP1 button.", url=f"{DOCS}/ap"),
    ])
    generator = MagicMock()
    generator.fallback_answer = FALLBACK
    generator.generate = AsyncMock(return_value=Answer(text=answer_text, total_tokens=10))
    orchestrator = QAOrchestrator(
        QueryGuard(["darn"]),
        embedder,
        retriever,
        generator,
        min_score=0.75,
        max_context_chars=16000,
        docs_base_url=DOCS,
    )
    return orchestrator, embedder, retriever, generator


@pytest.mark.asyncio
async def test_url_in_query_is_rejected_before_any_provider_call():
    orchestrator, embedder, retriever, generator = _orchestrator()
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("read https://evil.example.com please", responder)

    assert outcome.state is ChatState.FAILED
    assert outcome.error_kind is ErrorKind.UNSAFE_INPUT
    embedder.embed.assert_not_awaited()
    retriever.query.assert_not_awaited()
    generator.generate.assert_not_awaited()
    assert responder.statuses == []
    assert len(responder.embeds) == 1
    assert responder.reply_count == 1


@pytest.mark.asyncio
async def test_profane_query_gets_warning_text():
    orchestrator, embedder, _, _ = _orchestrator()
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("darn autopilot", responder)

    assert outcome.error_kind is ErrorKind.PROFANE_INPUT
    assert responder.texts == [chat_embeds.PROFANITY_WARNING]
    embedder.embed.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_query_points_to_documentation():
    orchestrator, embedder, _, _ = _orchestrator()
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("   ", responder)

    assert outcome.state is ChatState.REPLYING
    assert len(responder.embeds) == 1
    assert responder.statuses == []
    embedder.embed.assert_not_awaited()


@pytest.mark.asyncio
async def test_success_replies_with_answer_and_deletes_status():
    orchestrator, embedder, _, generator = _orchestrator()
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("how do I engage the autopilot", responder)

    assert outcome.succeeded
    assert responder.texts == ["Press AP1. For more information, see <https://docs.example.com/ap>"]
    assert responder.statuses == [chat_embeds.PROCESSING_MESSAGE]
    responder.status_message.delete.assert_awaited_once()
    embedder.embed.assert_awaited_once_with("how do I engage the autopilot?")
    assert generator.generate.await_args.args[0] == "how do I engage the autopilot?"
    assert outcome.context_count == 1


@pytest.mark.asyncio
async def test_sub_threshold_matches_reply_fallback_verbatim():
    matches = [
        RetrievalMatch(score=0.5, text="a", url=f"{DOCS}/a"),
        RetrievalMatch(score=0.7, text="b", url=f"{DOCS}/b"),
    ]
    orchestrator, _, _, generator = _orchestrator(matches=matches)
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("what is the A32NX?", responder)

    assert responder.texts == [FALLBACK]
    assert outcome.error_kind is ErrorKind.NO_RELEVANT_CONTEXT
    assert outcome.highest_score == pytest.approx(0.7)
    generator.generate.assert_not_awaited()
    responder.status_message.delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_embedding_failure_sends_query_failed_embed():
    orchestrator, embedder, retriever, _ = _orchestrator()
    embedder.embed.side_effect = BotError(ErrorKind.EMBEDDING_UNAVAILABLE, "down")
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("question", responder)

    assert outcome.error_kind is ErrorKind.EMBEDDING_UNAVAILABLE
    assert responder.texts == []
    assert len(responder.embeds) == 1
    retriever.query.assert_not_awaited()
    responder.status_message.delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_retrieval_failure_replies_fallback():
    orchestrator, _, retriever, _ = _orchestrator()
    retriever.query.side_effect = BotError(ErrorKind.RETRIEVAL_UNAVAILABLE, "down")
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("question", responder)

    assert outcome.error_kind is ErrorKind.RETRIEVAL_UNAVAILABLE
    assert responder.texts == [FALLBACK]


@pytest.mark.asyncio
async def test_generation_failure_replies_fallback_and_swallows_status_delete_error():
    orchestrator, _, _, generator = _orchestrator()
    generator.generate.side_effect = BotError(ErrorKind.GENERATION_FAILED, "no choices")
    responder = FakeResponder(delete_error=RuntimeError("already deleted"))

    outcome = await orchestrator.handle_chat_query("question", responder)

    assert outcome.state is ChatState.FAILED
    assert outcome.error_kind is ErrorKind.GENERATION_FAILED
    assert responder.texts == [FALLBACK]
    assert responder.reply_count == 1


@pytest.mark.asyncio
async def test_unexpected_error_is_treated_as_generation_failure():
    orchestrator, _, _, generator = _orchestrator()
    generator.generate.side_effect = KeyError("boom")
    responder = FakeResponder()

    outcome = await orchestrator.handle_chat_query("question", responder)

    assert outcome.error_kind is ErrorKind.GENERATION_FAILED
    assert responder.texts == [FALLBACK]
