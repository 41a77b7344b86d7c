"""Pydantic models describing poller configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_ERROR_KEY = "default_error_text"
DEFAULT_ERROR_TEXT = "Could not load a fact, please try again later."

DEFAULT_LOCAL_FACTS: tuple[str, ...] = (
    "Cats sleep for around 13 to 16 hours a day.",
    "A group of cats is called a clowder.",
    "Cats have five toes on their front paws but only four on the back.",
    "A cat's nose print is unique, much like a human fingerprint.",
    "Cats can rotate their ears 180 degrees.",
    "Adult cats meow mostly to communicate with people, not with other cats.",
    "A cat's purr vibrates at a frequency between 25 and 150 hertz.",
    "Cats spend up to a third of their waking hours grooming.",
)


class RemoteServiceConfig(BaseModel):
    """Where and how the remote fact service is queried."""

    url: str = "https://catfact.ninja/fact"
    fact_field: str = "fact"
    timeout: float = 10.0
    user_agent_list: list[str] = Field(default_factory=list)

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value

    @field_validator("url", "fact_field")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value cannot be empty")
        return value.strip()


class FallbackConfig(BaseModel):
    """Local facts served while the remote service is unreachable."""

    facts: list[str] = Field(default_factory=lambda: list(DEFAULT_LOCAL_FACTS))
    seed: int | None = None

    @field_validator("facts", mode="before")
    @classmethod
    def _clean_facts(cls, value: Any) -> list[str]:
        if value is None:
            return list(DEFAULT_LOCAL_FACTS)
        if not isinstance(value, (list, tuple)):
            raise ValueError("facts expects a list of strings")
        cleaned = [str(item).strip() for item in value if str(item).strip()]
        if not cleaned:
            raise ValueError("facts must contain at least one non-blank entry")
        return cleaned


class PollerConfig(BaseModel):
    """Top-level configuration shared by the CLI and the pipeline."""

    remote: RemoteServiceConfig = Field(default_factory=RemoteServiceConfig)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)
    messages: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _ensure_default_message(self) -> "PollerConfig":
        if not self.messages.get(DEFAULT_ERROR_KEY):
            self.messages[DEFAULT_ERROR_KEY] = DEFAULT_ERROR_TEXT
        return self


__all__ = [
    "DEFAULT_ERROR_KEY",
    "DEFAULT_ERROR_TEXT",
    "DEFAULT_LOCAL_FACTS",
    "FallbackConfig",
    "PollerConfig",
    "RemoteServiceConfig",
]
