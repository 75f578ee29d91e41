import os
from typing import Any, Dict, List

DEFAULT_DOCS_BASE_URL = "https://docs.flybywiresim.com"


class ChatSettings:
    """Typed accessors for the ``chat:`` section of the app configuration.

    Provider credentials are read from the environment (loaded from ``.env``
    at startup); everything else comes from the YAML mapping.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    @property
    def docs_base_url(self) -> str:
        value = str(self.data.get("docs_base_url") or DEFAULT_DOCS_BASE_URL)
        return value.rstrip("/")

    # -- OpenAI ---------------------------------------------------------
    @property
    def openai_api_key(self) -> str | None:
        return os.getenv("OPENAI_API_KEY") or self.data.get("openai_api_key")

    @property
    def openai_base_url(self) -> str | None:
        return os.getenv("OPENAI_BASE_URL") or self.data.get("openai_base_url")

    @property
    def embedding_model(self) -> str:
        return str(self.data.get("embedding_model", "text-embedding-ada-002"))

    @property
    def completion_model(self) -> str:
        return str(self.data.get("completion_model", "gpt-4"))

    @property
    def completion_mode(self) -> str:
        """``chat`` for chat-completion models, ``text`` for plain completion models."""
        mode = str(self.data.get("completion_mode", "chat")).lower()
        return mode if mode in ("chat", "text") else "chat"

    @property
    def temperature(self) -> float:
        return float(self.data.get("temperature", 0.0))

    @property
    def max_tokens(self) -> int:
        return int(self.data.get("max_tokens", 500))

    @property
    def embedding_max_retries(self) -> int:
        return int(self.data.get("embedding_max_retries", 5))

    @property
    def embedding_retry_delay_seconds(self) -> float:
        return float(self.data.get("embedding_retry_delay_seconds", 2.0))

    # -- Retrieval ------------------------------------------------------
    @property
    def pinecone_api_key(self) -> str | None:
        return os.getenv("PINECONE_API_KEY") or self.data.get("pinecone_api_key")

    @property
    def pinecone_index_name(self) -> str:
        return os.getenv("PINECONE_INDEX_NAME") or str(self.data.get("pinecone_index_name", ""))

    @property
    def pinecone_namespace(self) -> str:
        return os.getenv("PINECONE_NAMESPACE") or str(self.data.get("pinecone_namespace", ""))

    @property
    def vector_results(self) -> int:
        return int(self.data.get("vector_results", 1))

    @property
    def min_vector_score(self) -> float:
        return float(self.data.get("min_vector_score", 0.75))

    @property
    def max_context_chars(self) -> int:
        return int(self.data.get("max_context_chars", 16000))

    # -- Guard ----------------------------------------------------------
    @property
    def blocked_words(self) -> List[str]:
        words = self.data.get("blocked_words", [])
        if not isinstance(words, list):
            return []
        return [str(word).lower() for word in words if word]
