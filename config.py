# config.py
import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from errors import ConfigError

DEFAULT_MODEL_NAME = "gpt-4o-mini"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_RESPONSE_FIELD = "response"


class ReviewServiceConfig(BaseModel):
    """Where and how to reach the AI review endpoint."""

    model_config = ConfigDict(frozen=True)

    api_url: str = ""
    api_key: str = Field(default="", repr=False)
    model_name: str = DEFAULT_MODEL_NAME
    prompt_name: Optional[str] = None
    timeout: float = 60.0
    # dotted path to the JSON-encoded payload inside the response body
    response_field: str = DEFAULT_RESPONSE_FIELD


class ActionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    github_token: str = Field(default="", repr=False)
    github_api_url: str = DEFAULT_GITHUB_API_URL
    review_service: ReviewServiceConfig = Field(default_factory=ReviewServiceConfig)
    exclude_patterns: List[str] = Field(default_factory=list)
    concurrency: int = 1
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "ActionConfig":
        """
        Build the config from action inputs (INPUT_<NAME>) or plain env vars.
        Blank values count as unset.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        def get(name: str, default: str = "") -> str:
            value = environ.get(f"INPUT_{name}") or environ.get(name)
            return value.strip() if value and value.strip() else default

        return cls(
            github_token=get("GITHUB_TOKEN"),
            github_api_url=get("GITHUB_API_URL", DEFAULT_GITHUB_API_URL),
            review_service=ReviewServiceConfig(
                api_url=get("API_URL"),
                api_key=get("API_KEY"),
                model_name=get("MODEL_NAME", DEFAULT_MODEL_NAME),
                prompt_name=get("PROMPT_NAME") or None,
                timeout=_number(get("REVIEW_TIMEOUT", "60"), "REVIEW_TIMEOUT", float),
                response_field=get("RESPONSE_FIELD", DEFAULT_RESPONSE_FIELD),
            ),
            exclude_patterns=parse_exclude_patterns(get("EXCLUDE")),
            concurrency=_number(get("REVIEW_CONCURRENCY", "1"), "REVIEW_CONCURRENCY", int),
            log_level=get("LOG_LEVEL", "INFO"),
        )

    def missing_settings(self) -> List[str]:
        missing = []
        if not self.github_token:
            missing.append("GITHUB_TOKEN")
        if not self.review_service.api_url:
            missing.append("API_URL")
        if not self.review_service.api_key:
            missing.append("API_KEY")
        return missing


def parse_exclude_patterns(raw: str) -> List[str]:
    """Split a comma-separated glob list, dropping blanks."""
    return [p.strip() for p in (raw or "").split(",") if p.strip()]


def _number(raw: str, name: str, kind):
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
