import pytest

from docbot.datatypes.chat_datatypes import ChatOutcome, ChatQuery, ChatState
from docbot.datatypes.errors import BotError, ErrorKind


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("how do I  engage\tAP", "how do I engage AP?"),
        ("what is the FCU?", "what is the FCU?"),
        ("is it? really", "is it? really"),
        ("?", "??"),
    ],
)
def test_search_query_appends_question_mark_when_missing(raw, expected):
    assert ChatQuery.from_text(raw).search_query == expected


def test_blank_query_is_empty():
    assert ChatQuery.from_text(" \n ").is_empty
    assert ChatQuery.from_text(None).is_empty


def test_outcome_success_requires_replying_without_error():
    assert ChatOutcome(state=ChatState.REPLYING).succeeded
    assert not ChatOutcome(state=ChatState.FAILED, error_kind=ErrorKind.GENERATION_FAILED).succeeded


def test_bot_error_carries_kind_and_detail():
    error = BotError(ErrorKind.NOT_FOUND, "job 4")

    assert error.kind is ErrorKind.NOT_FOUND
    assert error.detail == "job 4"
    assert str(error) == "not_found: job 4"
