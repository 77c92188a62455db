"""Configuration values for the code completer."""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.errors import ConfigError
from ..core.prompt import check_template

# Default chat-completion endpoint (llama.cpp server / llamafile layout)
LLM_ENDPOINT = "http://localhost:8080/v1/chat/completions"

# Model name sent in the request body; llama.cpp ignores it but requires the field
LLM_MODEL = "LLaMA_CPP"

# Placeholder bearer token, no real authentication is implemented
LLM_API_KEY = "no-key"

# Characters of text before the cursor sent as context
CONTEXT_LIMIT = 700

# Upper bound on generated tokens; keeps latency and preview size down
MAX_TOKENS = 100

# Deterministic output
TEMPERATURE = 0.0

SYSTEM_PROMPT = (
    "You are an expert programmer that writes simple, concise code. "
    "Only output code. Do not write comments, explanations or test code."
)

INSTRUCTION_TEMPLATE = (
    "Generate {language} code to complete the following snippet. "
    "Output only the continuation.\n"
    "```{language}\n{context}\n```"
)


class Settings(BaseSettings):
    """Completer settings, overridable through CODECOMPLETER_* environment variables or a .env file."""

    endpoint: str = LLM_ENDPOINT
    model: str = LLM_MODEL
    api_key: str = LLM_API_KEY
    system_prompt: str = SYSTEM_PROMPT
    instruction_template: str = INSTRUCTION_TEMPLATE
    context_limit: int = Field(default=CONTEXT_LIMIT, ge=0)
    max_tokens: int = Field(default=MAX_TOKENS, gt=0)
    temperature: float = Field(default=TEMPERATURE, ge=0.0, le=2.0)
    # Seconds; None leaves the HTTP call without a timeout
    request_timeout: float | None = Field(default=None, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CODECOMPLETER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("instruction_template")
    @classmethod
    def _template_fields(cls, value: str) -> str:
        check_template(value)
        return value

    @field_validator("endpoint")
    @classmethod
    def _endpoint_scheme(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level == "WARN":
            level = "WARNING"
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings(**overrides) -> Settings:
    """
    Build Settings from the environment plus explicit overrides.

    None-valued overrides are ignored, so unset CLI options fall through to the
    environment and the defaults above.
    """
    given = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**given)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e
