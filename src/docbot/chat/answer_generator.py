"""
Grounded answer generation over assembled documentation context.

Supports both chat-completion models (system + user messages) and plain
text-completion models (one flattened prompt); which one is used is a
configuration choice, the instructions given to the model are identical.
"""

from __future__ import annotations

from typing import Any, List

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionMessageParam

from docbot.datatypes.chat_datatypes import Answer, AssembledContext
from docbot.datatypes.errors import BotError, ErrorKind
from docbot.util.logger import get_logger

logger = get_logger("answer_generator")

ATTRIBUTION_PHRASE = "For more information, see"


def build_fallback_answer(docs_base_url: str) -> str:
    """Return the canonical sentence used whenever no grounded answer exists."""
    return (
        "I'm not sure, perhaps you can rephrase the question or find the answer "
        f"in our documentation: <{docs_base_url}>"
    )


def build_instructions(fallback_answer: str) -> str:
    return "".join((
        "You are the FlyByWire Discord bot who answers a question based on the provided contexts and user question.\n",
        "Instructions:\n",
        "- Answer the question only based on the contexts below and include all relevant information, "
        "consider the scores of the contexts when answering\n",
        "- If the question can be answered, include exactly one URL, the URL of the most used Context, "
        f'preceded by "{ATTRIBUTION_PHRASE}". Do not mention you got information from a Context.\n',
        '- Any URL must be prepended with "<" and appended with ">"\n',
        f'- If the question can not be answered, you must answer with exactly "{fallback_answer}"\n',
    ))


def format_context_block(position: int, url: str, score: float, text: str) -> str:
    return f"Context {position}:\nURL: {url}\nScore: {score}\nContent: {text}"


class AnswerGenerator:
    """Asks the completion endpoint to answer a question from the given context."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        *,
        fallback_answer: str,
        mode: str = "chat",
        temperature: float = 0.0,
        max_tokens: int = 500,
    ) -> None:
        self._client = client
        self.model = model
        self.fallback_answer = fallback_answer
        self.mode = mode
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.instructions = build_instructions(fallback_answer)

    def build_messages(self, question: str, context: AssembledContext) -> List[ChatCompletionMessageParam]:
        messages: List[ChatCompletionMessageParam] = [{"role": "system", "content": self.instructions}]
        for position, block in enumerate(context.blocks, start=1):
            messages.append({
                "role": "user",
                "content": format_context_block(position, block.url, block.score, block.text),
            })
        messages.append({"role": "user", "content": f"Question: {question}"})
        return messages

    def build_prompt(self, question: str, context: AssembledContext) -> str:
        blocks = [
            format_context_block(position, block.url, block.score, block.text)
            for position, block in enumerate(context.blocks, start=1)
        ]
        return "\n\n".join([self.instructions, *blocks, f"Question: {question}", "Answer:"])

    async def generate(self, question: str, context: AssembledContext) -> Answer:
        """Return the model's answer.

        Raises:
            BotError: ``GENERATION_FAILED`` if the request fails or returns no choices.
        """
        try:
            if self.mode == "text":
                response = await self._client.completions.create(
                    model=self.model,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    prompt=self.build_prompt(question, context),
                )
            else:
                response = await self._client.chat.completions.create(
                    model=self.model,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    messages=self.build_messages(question, context),
                )
        except Exception as exc:
            logger.error("[GENERATOR] Completion request failed: %s", exc)
            raise BotError(ErrorKind.GENERATION_FAILED, str(exc)) from exc

        if not response.choices:
            raise BotError(ErrorKind.GENERATION_FAILED, "completion returned no choices")

        text = _choice_text(response.choices[0]).strip()
        if not text:
            raise BotError(ErrorKind.GENERATION_FAILED, "completion returned empty text")

        usage = getattr(response, "usage", None)
        return Answer(
            text=text,
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
        )


def _choice_text(choice: Any) -> str:
    message = getattr(choice, "message", None)
    if message is not None:
        return getattr(message, "content", None) or ""
    return getattr(choice, "text", None) or ""
