"""Packs retrieved documentation excerpts into the prompt's character budget."""

from __future__ import annotations

from typing import Sequence

from docbot.datatypes.chat_datatypes import AssembledContext, ContextBlock, NoContext, RetrievalMatch
from docbot.util.logger import get_logger

logger = get_logger("context_assembler")


def assemble_context(
    matches: Sequence[RetrievalMatch],
    min_score: float,
    max_chars: int,
) -> AssembledContext | NoContext:
    """Select the matches that go into the prompt.

    Matches below ``min_score`` are dropped. The rest are taken in retrieval
    order; a block that would overflow ``max_chars`` is skipped whole and the
    walk continues, so a shorter block further down can still fit. Matches
    without both a text and a URL are ignored.

    Returns:
        AssembledContext, or NoContext carrying the best unfiltered score when
        nothing clears the threshold.
    """
    relevant = [match for match in matches if match.score >= min_score]
    if not relevant:
        highest = max((match.score for match in matches), default=None)
        logger.debug(
            "[CONTEXT] No valid context found - highest score: %s - score needed: %s",
            highest, min_score,
        )
        return NoContext(highest_score=highest)

    context = AssembledContext()
    total_score = 0.0
    for match in relevant:
        if match.text is None or match.url is None:
            continue
        if context.total_length + len(match.text) > max_chars:
            continue
        context.blocks.append(ContextBlock(text=match.text, url=match.url, score=match.score))
        context.total_length += len(match.text)
        total_score += match.score

    context.average_score = total_score / context.count if context.count else 0.0
    return context
