"""Nearest-neighbour lookup against the documentation vector index."""

from __future__ import annotations

import asyncio
from typing import Any, List, Sequence

from docbot.datatypes.chat_datatypes import RetrievalMatch
from docbot.datatypes.errors import BotError, ErrorKind
from docbot.util.logger import get_logger

logger = get_logger("vector_retriever")


class VectorRetriever:
    """Queries a Pinecone index for the documents closest to an embedding.

    Failures are terminal for the request: there is no retry here.
    """

    def __init__(self, index: Any, top_k: int, namespace: str = "") -> None:
        self._index = index
        self.top_k = top_k
        self.namespace = namespace

    async def query(self, vector: Sequence[float]) -> List[RetrievalMatch]:
        """Return matches in the order the index produced them.

        Raises:
            BotError: ``RETRIEVAL_UNAVAILABLE`` on any provider error.
        """
        try:
            # The Pinecone SDK is synchronous
            response = await asyncio.to_thread(
                lambda: self._index.query(
                    vector=list(vector),
                    top_k=self.top_k,
                    namespace=self.namespace,
                    include_metadata=True,
                )
            )
        except Exception as exc:
            logger.error("[RETRIEVER] Vector query failed: %s", exc)
            raise BotError(ErrorKind.RETRIEVAL_UNAVAILABLE, str(exc)) from exc

        matches = [_to_match(raw) for raw in _raw_matches(response)]
        logger.debug("[RETRIEVER] %d match(es) returned (top_k=%d)", len(matches), self.top_k)
        return matches


def _raw_matches(response: Any) -> List[Any]:
    if isinstance(response, dict):
        return list(response.get("matches") or [])
    return list(getattr(response, "matches", None) or [])


def _field(raw: Any, name: str) -> Any:
    if isinstance(raw, dict):
        return raw.get(name)
    return getattr(raw, name, None)


def _to_match(raw: Any) -> RetrievalMatch:
    metadata = _field(raw, "metadata") or {}
    text = metadata.get("text") if isinstance(metadata, dict) else None
    url = metadata.get("url") if isinstance(metadata, dict) else None
    return RetrievalMatch(
        score=float(_field(raw, "score") or 0.0),
        text=text if isinstance(text, str) else None,
        url=url if isinstance(url, str) else None,
    )
