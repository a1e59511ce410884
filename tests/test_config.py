import logging

import pytest

from studyflow.agents.llm.client import get_llm_client
from studyflow.agents.llm.gemini import GeminiClient
from studyflow.agents.llm.ollama import OllamaOpenAIClient
from studyflow.errors import ConfigurationError
from studyflow.log import configure_logging
from studyflow.settings import Settings, settings


def test_gemini_key_accepts_legacy_env_name(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy-key")

    assert Settings(_env_file=None).GEMINI_API_KEY == "legacy-key"


def test_missing_gemini_key_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "LLM_PROVIDER", "gemini")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)

    with pytest.raises(ConfigurationError):
        get_llm_client()


def test_unknown_provider_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "LLM_PROVIDER", "carrier-pigeon")

    with pytest.raises(ConfigurationError, match="carrier-pigeon"):
        get_llm_client()


def test_provider_selection(monkeypatch):
    monkeypatch.setattr(settings, "LLM_PROVIDER", "Ollama")
    assert isinstance(get_llm_client(), OllamaOpenAIClient)

    monkeypatch.setattr(settings, "LLM_PROVIDER", "gemini")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")
    assert isinstance(get_llm_client(), GeminiClient)


def test_configure_logging_is_idempotent():
    logger = configure_logging("debug")
    configure_logging("warning")

    ours = [h for h in logger.handlers if getattr(h, "_studyflow", False)]
    assert len(ours) == 1
    assert logger.level == logging.WARNING
