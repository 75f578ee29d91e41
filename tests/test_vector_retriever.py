from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from docbot.chat.vector_retriever import VectorRetriever
from docbot.datatypes.errors import BotError, ErrorKind


@pytest.mark.asyncio
async def test_query_parses_dict_response_in_provider_order():
    index = MagicMock()
    index.query.return_value = {
        "matches": [
            {"score": 0.7, "metadata": {"text": "second best", "url": "https://docs.example.com/b"}},
            {"score": 0.9, "metadata": {"text": "best", "url": "https://docs.example.com/a"}},
        ]
    }
    retriever = VectorRetriever(index, top_k=2, namespace="docs")

    matches = await retriever.query([0.1, 0.2])

    assert [match.score for match in matches] == [0.7, 0.9]
    assert matches[1].text == "best"
    index.query.assert_called_once_with(vector=[0.1, 0.2], top_k=2, namespace="docs", include_metadata=True)


@pytest.mark.asyncio
async def test_query_parses_object_response_without_metadata():
    index = MagicMock()
    index.query.return_value = SimpleNamespace(matches=[SimpleNamespace(score=0.8, metadata=None)])
    retriever = VectorRetriever(index, top_k=1)

    matches = await retriever.query([0.3])

    assert len(matches) == 1
    assert matches[0].text is None
    assert matches[0].url is None


@pytest.mark.asyncio
async def test_query_error_maps_to_retrieval_unavailable():
    index = MagicMock()
    index.query.side_effect = ConnectionError("pinecone down")
    retriever = VectorRetriever(index, top_k=1)

    with pytest.raises(BotError) as excinfo:
        await retriever.query([0.1])

    assert excinfo.value.kind is ErrorKind.RETRIEVAL_UNAVAILABLE
