import pytest

from docbot.chat.query_guard import QueryGuard, looks_like_url
from docbot.datatypes.errors import BotError, ErrorKind


@pytest.mark.parametrize(
    "token",
    [
        "https://docs.flybywiresim.com/fbw-a32nx/",
        "http://example.com",
        "ftp://files.example.org/a.zip",
        "mailto:someone@example.com",
        "https:evil.com",
        "https:/evil.com",
        "http:\\\\evil.com",
        "WSS:evil.com/socket",
    ],
)
def test_looks_like_url_accepts_absolute_urls(token):
    assert looks_like_url(token) is True


@pytest.mark.parametrize("token", ["autopilot", "A32NX?", "v1.2", "example.com", "ATC:", "http:", ""])
def test_looks_like_url_rejects_plain_words(token):
    assert looks_like_url(token) is False


def test_check_raises_unsafe_input_for_url():
    guard = QueryGuard(["darn"])

    with pytest.raises(BotError) as excinfo:
        guard.check(["what", "is", "https://evil.example.com"])

    assert excinfo.value.kind is ErrorKind.UNSAFE_INPUT


def test_check_raises_profane_input_case_insensitive_with_punctuation():
    guard = QueryGuard(["Darn"])

    with pytest.raises(BotError) as excinfo:
        guard.check(["why", "is", "this", "DARN!", "thing", "broken"])

    assert excinfo.value.kind is ErrorKind.PROFANE_INPUT


def test_first_offending_token_decides_kind():
    guard = QueryGuard(["darn"])

    with pytest.raises(BotError) as excinfo:
        guard.check(["darn", "https://example.com"])

    assert excinfo.value.kind is ErrorKind.PROFANE_INPUT


def test_check_passes_clean_query():
    guard = QueryGuard(["darn"])

    guard.check(["how", "do", "I", "engage", "the", "autopilot?"])


@pytest.mark.parametrize("token", ["https:evil.com", "https:/evil.com", "http:\\\\evil.com"])
def test_check_rejects_urls_without_slashes(token):
    guard = QueryGuard()

    with pytest.raises(BotError) as excinfo:
        guard.check(["see", token])

    assert excinfo.value.kind is ErrorKind.UNSAFE_INPUT


def test_check_uses_library_word_list_without_configured_words():
    guard = QueryGuard([])

    with pytest.raises(BotError) as excinfo:
        guard.check(["this", "shit", "is", "broken"])

    assert excinfo.value.kind is ErrorKind.PROFANE_INPUT


def test_configured_words_extend_library_word_list():
    assert QueryGuard().is_profane("flargle") is False
    assert QueryGuard(["Flargle"]).is_profane("FLARGLE!") is True
