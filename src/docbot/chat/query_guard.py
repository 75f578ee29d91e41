"""
Input guard for the documentation chat command.

Rejects questions that contain links (so users cannot make the bot echo
their own URLs) or profanity, before any provider is contacted. Profanity
is detected with the better-profanity word list plus any extra words
configured under ``chat.blocked_words``.
"""

from __future__ import annotations

import string
from typing import Iterable, Sequence
from urllib.parse import urlparse

from better_profanity import Profanity

from docbot.datatypes.errors import BotError, ErrorKind
from docbot.util.logger import get_logger

logger = get_logger("query_guard")

# Schemes a URL parser completes to scheme://host even without slashes
_SPECIAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})
# Schemes that form a usable URL without a network location
_OPAQUE_SCHEMES = frozenset({"mailto", "javascript", "data", "file", "tel"})


def looks_like_url(token: str) -> bool:
    """Return True when ``token`` parses as an absolute URL.

    ``https:evil.com``, ``https:/evil.com`` and ``http:\\\\evil.com`` count as
    URLs because browsers and WHATWG parsers resolve them to ``https://evil.com/``.
    """
    try:
        parsed = urlparse(token)
    except ValueError:
        return False
    scheme = parsed.scheme.lower()
    if not scheme:
        return False
    if parsed.netloc:
        return True
    if scheme in _SPECIAL_SCHEMES:
        return bool(parsed.path.strip("/\\"))
    return scheme in _OPAQUE_SCHEMES and bool(parsed.path)


class QueryGuard:
    """URL and profanity screen for chat queries."""

    def __init__(self, blocked_words: Iterable[str] = ()) -> None:
        self.blocked_words = sorted({word.lower() for word in blocked_words if word})
        self._profanity = Profanity()
        if self.blocked_words:
            self._profanity.add_censor_words(self.blocked_words)

    def is_profane(self, token: str) -> bool:
        normalized = token.lower().strip(string.punctuation)
        return bool(normalized) and self._profanity.contains_profanity(normalized)

    def check(self, words: Sequence[str]) -> None:
        """Validate every token in order.

        Raises:
            BotError: ``UNSAFE_INPUT`` for a URL token, ``PROFANE_INPUT`` for a
                blocked word. The first offending token decides which.
        """
        for word in words:
            if looks_like_url(word):
                logger.debug("[GUARD] Rejected query containing URL token %r", word)
                raise BotError(ErrorKind.UNSAFE_INPUT, "URLs are not allowed in queries")
            if self.is_profane(word):
                logger.debug("[GUARD] Rejected query containing a blocked word")
                raise BotError(ErrorKind.PROFANE_INPUT, "blocked word in query")
