from pathlib import Path

import pytest
import yaml

from docbot.configuration.app_configuration import AppConfig
from docbot.configuration.schedule_settings import DEFAULT_SUPPORTED_COMMANDS


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "app_config.yml"


def test_app_config_reload_parses_yaml(config_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("PINECONE_NAMESPACE", raising=False)
    config_payload = {
        "database": {"path": str(config_path.parent / "db" / "bot.db")},
        "chat": {
            "docs_base_url": "https://docs.example.com/",
            "completion_mode": "TEXT",
            "completion_model": "gpt-3.5-turbo-instruct",
            "min_vector_score": 0.8,
            "max_context_chars": 4000,
            "blocked_words": ["Darn"],
            "pinecone_namespace": "docs",
        },
        "schedule": {
            "mod_logs_channel_id": "42",
            "permitted_role_ids": [1, "2", "not-a-role"],
            "poll_interval_seconds": 2,
            "supported_commands": ["WARN", "ban"],
        },
    }
    config_path.write_text(yaml.safe_dump(config_payload), encoding="utf-8")

    config = AppConfig(config_path)

    chat = config.chat_settings
    assert chat.docs_base_url == "https://docs.example.com"
    assert chat.completion_mode == "text"
    assert chat.completion_model == "gpt-3.5-turbo-instruct"
    assert chat.min_vector_score == pytest.approx(0.8)
    assert chat.max_context_chars == 4000
    assert chat.blocked_words == ["darn"]
    assert chat.pinecone_namespace == "docs"

    schedule = config.schedule_settings
    assert schedule.mod_logs_channel_id == 42
    assert schedule.permitted_role_ids == [1, 2]
    assert schedule.poll_interval_seconds == pytest.approx(2.0)
    assert schedule.supported_commands == ["warn", "ban"]

    assert config.database_path == (config_path.parent / "db" / "bot.db").resolve()


def test_app_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "does_not_exist.yml")

    assert config.data == {}
    chat = config.chat_settings
    assert chat.completion_mode == "chat"
    assert chat.embedding_model == "text-embedding-ada-002"
    assert chat.embedding_max_retries == 5
    assert chat.embedding_retry_delay_seconds == pytest.approx(2.0)
    assert chat.min_vector_score == pytest.approx(0.75)
    assert chat.max_context_chars == 16000
    assert chat.vector_results == 1
    assert chat.max_tokens == 500
    assert chat.temperature == 0.0

    schedule = config.schedule_settings
    assert schedule.mod_logs_channel_id is None
    assert schedule.permitted_role_ids == []
    assert schedule.supported_commands == DEFAULT_SUPPORTED_COMMANDS


def test_environment_overrides_provider_settings(config_path: Path, monkeypatch) -> None:
    config_path.write_text("chat:\n  pinecone_index_name: from-yaml\n", encoding="utf-8")
    monkeypatch.setenv("PINECONE_INDEX_NAME", "from-env")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    chat = AppConfig(config_path).chat_settings

    assert chat.pinecone_index_name == "from-env"
    assert chat.openai_api_key == "sk-test"


def test_non_mapping_yaml_is_ignored(config_path: Path) -> None:
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    config = AppConfig(config_path)

    assert config.data == {}
