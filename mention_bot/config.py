"""
Configuration module for the mention bot

Values are read once from the environment at startup and frozen.
"""

import os
from typing import Dict, List, Mapping, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, SecretStr, ValidationError

from .errors import ConfigError

DEFAULT_FALLBACK_MESSAGE = (
    "Sorry, I couldn't generate a response right now. Please try again later."
)
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_WORKERS = 8
DEFAULT_EVENTS_PATH = "/push"


class BridgeConfig(BaseModel):
    """LLM endpoint and dispatch settings shared by every mention task"""
    model_config = ConfigDict(frozen=True)

    endpoint_url: AnyHttpUrl = Field(..., description="Chat completion endpoint URL")
    operator_id: str = Field(..., min_length=1, description="Sent as the x-operator-id header")
    credential: SecretStr = Field(..., description="Bearer token for the endpoint")
    default_model: str = Field(..., min_length=1, description="Model used when no override is given")
    system_prompt: Optional[str] = Field(None, description="Sent as a leading developer message")
    request_timeout: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0, description="HTTP timeout in seconds")
    max_workers: int = Field(DEFAULT_MAX_WORKERS, ge=1, description="Mentions handled concurrently")
    fallback_message: str = Field(DEFAULT_FALLBACK_MESSAGE, min_length=1)


class SlackConfig(BaseModel):
    """Slack credentials and webhook serving settings"""
    model_config = ConfigDict(frozen=True)

    bot_token: SecretStr
    signing_secret: SecretStr
    app_token: Optional[SecretStr] = Field(None, description="Enables Socket Mode when set")
    host: str = "127.0.0.1"
    port: int = Field(3000, ge=1, le=65535)
    events_path: str = DEFAULT_EVENTS_PATH

    @property
    def socket_mode(self) -> bool:
        return self.app_token is not None


# env var -> field name
BRIDGE_ENV = {
    "LLM_ENDPOINT_URL": "endpoint_url",
    "LLM_OPERATOR_ID": "operator_id",
    "LLM_API_KEY": "credential",
    "LLM_MODEL": "default_model",
    "LLM_SYSTEM_PROMPT": "system_prompt",
    "LLM_TIMEOUT_SECONDS": "request_timeout",
    "BRIDGE_MAX_WORKERS": "max_workers",
    "BRIDGE_FALLBACK_MESSAGE": "fallback_message",
}
BRIDGE_REQUIRED = ["LLM_ENDPOINT_URL", "LLM_OPERATOR_ID", "LLM_API_KEY", "LLM_MODEL"]

SLACK_ENV = {
    "SLACK_BOT_TOKEN": "bot_token",
    "SLACK_SIGNING_SECRET": "signing_secret",
    "SLACK_APP_TOKEN": "app_token",
    "SLACK_HOST": "host",
    "PORT": "port",
    "SLACK_EVENTS_PATH": "events_path",
}
SLACK_REQUIRED = ["SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET"]


def missing_variables(required: List[str], environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Return the required variables that are unset or blank."""
    env = os.environ if environ is None else environ
    return [name for name in required if not (env.get(name) or "").strip()]


def _collect(mapping: Dict[str, str], environ: Mapping[str, str]) -> Dict[str, str]:
    values = {}
    for env_name, field in mapping.items():
        value = environ.get(env_name)
        if value is not None and value.strip():
            values[field] = value.strip()
    return values


def _build(model, mapping, required, environ, label):
    env = os.environ if environ is None else environ

    missing = missing_variables(required, env)
    if missing:
        raise ConfigError(f"Missing required {label} settings: {', '.join(missing)}")

    try:
        return model(**_collect(mapping, env))
    except ValidationError as e:
        raise ConfigError(f"Invalid {label} settings: {e}") from e


def load_bridge_config(environ: Optional[Mapping[str, str]] = None) -> BridgeConfig:
    """
    Build the LLM bridge configuration from environment variables.

    Raises:
        ConfigError: if a required variable is missing or a value is invalid
    """
    return _build(BridgeConfig, BRIDGE_ENV, BRIDGE_REQUIRED, environ, "LLM")


def load_slack_config(environ: Optional[Mapping[str, str]] = None) -> SlackConfig:
    """Build the Slack configuration from environment variables."""
    return _build(SlackConfig, SLACK_ENV, SLACK_REQUIRED, environ, "Slack")
