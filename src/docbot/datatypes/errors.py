"""
Error taxonomy shared by the chat and schedule pipelines.

Components raise :class:`BotError` tagged with an :class:`ErrorKind`; the
cogs translate each kind into exactly one user-facing message so provider
errors never reach Discord users verbatim.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Enumeration of failure categories."""

    UNSAFE_INPUT = "unsafe_input"
    PROFANE_INPUT = "profane_input"
    EMBEDDING_UNAVAILABLE = "embedding_unavailable"
    RETRIEVAL_UNAVAILABLE = "retrieval_unavailable"
    NO_RELEVANT_CONTEXT = "no_relevant_context"
    GENERATION_FAILED = "generation_failed"
    MISSING_TIMER = "missing_timer"
    MISSING_COMMAND = "missing_command"
    UNSUPPORTED_COMMAND = "unsupported_command"
    NOT_FOUND = "not_found"
    CHANNEL_UNAVAILABLE = "channel_unavailable"

    def __str__(self) -> str:
        return self.value


class BotError(Exception):
    """Exception carrying an :class:`ErrorKind` and an optional detail string."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        super().__init__(f"{kind}: {detail}" if detail else str(kind))
        self.kind = kind
        self.detail = detail
