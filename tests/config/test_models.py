from __future__ import annotations

import pytest
from pydantic import ValidationError

from fact_poller.config import (
    DEFAULT_ERROR_KEY,
    DEFAULT_ERROR_TEXT,
    DEFAULT_LOCAL_FACTS,
    FallbackConfig,
    PollerConfig,
    RemoteServiceConfig,
)


def test_poller_config_defaults() -> None:
    config = PollerConfig()
    assert config.remote.url == "https://catfact.ninja/fact"
    assert config.remote.fact_field == "fact"
    assert config.fallback.facts == list(DEFAULT_LOCAL_FACTS)
    assert config.messages[DEFAULT_ERROR_KEY] == DEFAULT_ERROR_TEXT


def test_custom_messages_keep_default_error_text() -> None:
    config = PollerConfig(messages={"greeting": "hi"})
    assert config.messages["greeting"] == "hi"
    assert config.messages[DEFAULT_ERROR_KEY] == DEFAULT_ERROR_TEXT

    overridden = PollerConfig(messages={DEFAULT_ERROR_KEY: "Oops"})
    assert overridden.messages[DEFAULT_ERROR_KEY] == "Oops"


def test_remote_config_validation() -> None:
    with pytest.raises(ValidationError):
        RemoteServiceConfig(timeout=0)
    with pytest.raises(ValidationError):
        RemoteServiceConfig(url="   ")
    config = RemoteServiceConfig(url=" https://example.com/fact ", fact_field="text")
    assert config.url == "https://example.com/fact"
    assert config.fact_field == "text"


def test_fallback_facts_are_cleaned() -> None:
    config = FallbackConfig(facts=["  one ", "", "two"])
    assert config.facts == ["one", "two"]
    with pytest.raises(ValidationError):
        FallbackConfig(facts=["", "   "])
    with pytest.raises(ValidationError):
        FallbackConfig(facts="not a list")
    assert FallbackConfig(facts=None).facts == list(DEFAULT_LOCAL_FACTS)
