"""
Data structures for the documentation chat pipeline.

Every type here is ephemeral: created for a single ``/chat`` invocation and
discarded once the reply is sent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from docbot.datatypes.errors import ErrorKind


@dataclass(slots=True)
class ChatQuery:
    """A user question split into search words.

    Attributes:
        raw_text: Text exactly as the user typed it.
        search_words: Whitespace-separated tokens of the question.
    """
    raw_text: str
    search_words: List[str] = field(default_factory=list)

    @classmethod
    def from_text(cls, raw_text: str) -> ChatQuery:
        words = [word for word in re.split(r"\s+", raw_text or "") if word]
        return cls(raw_text=raw_text or "", search_words=words)

    @property
    def is_empty(self) -> bool:
        return not self.search_words

    @property
    def search_query(self) -> str:
        """Search words joined by single spaces, ending in a question mark.

        A ``?`` anywhere after the first character counts as already present.
        """
        query = " ".join(self.search_words)
        return query if query.find("?") > 0 else f"{query}?"


@dataclass(slots=True)
class RetrievalMatch:
    """A nearest-neighbour hit from the vector index."""
    score: float
    text: str | None = None
    url: str | None = None


@dataclass(slots=True)
class ContextBlock:
    """A documentation excerpt selected for the prompt."""
    text: str
    url: str
    score: float


@dataclass(slots=True)
class AssembledContext:
    """Context blocks packed into the character budget, in retrieval order."""
    blocks: List[ContextBlock] = field(default_factory=list)
    total_length: int = 0
    average_score: float = 0.0

    @property
    def count(self) -> int:
        return len(self.blocks)


@dataclass(slots=True)
class NoContext:
    """No match cleared the relevance threshold.

    Attributes:
        highest_score: Best score among all unfiltered matches, for diagnostics.
    """
    highest_score: float | None = None


@dataclass(slots=True)
class Answer:
    """Completion returned by the answer generator."""
    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatState(Enum):
    """Stages of the QA orchestrator."""

    GUARDING = "guarding"
    EMBEDDING = "embedding"
    RETRIEVING = "retrieving"
    ASSEMBLING = "assembling"
    GENERATING = "generating"
    REPLYING = "replying"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class ChatOutcome:
    """Terminal result of a chat invocation.

    Attributes:
        state: ``REPLYING`` on success, ``FAILED`` otherwise.
        reply: Text sent to the user (``None`` when an embed was sent instead).
        error_kind: Failure category, ``None`` on success or empty query.
        highest_score: Best retrieval score when no context cleared the threshold.
        context_count: Number of context blocks sent to the model.
        average_score: Mean score of those blocks.
    """
    state: ChatState
    reply: str | None = None
    error_kind: ErrorKind | None = None
    highest_score: float | None = None
    context_count: int = 0
    average_score: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.state is ChatState.REPLYING and self.error_kind is None
