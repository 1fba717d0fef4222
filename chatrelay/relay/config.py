"""Relay configuration with environment variable loading.

Pydantic-based configuration for the upstream chat-completion provider.
Targets OpenRouter by default; any OpenAI-compatible API works via LLM_BASE_URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "meta-llama/llama-3-8b-instruct"


class RelayConfig(BaseModel):
    """Configuration for the streaming chat relay.

    Attributes:
        api_key: Bearer credential for the upstream provider.
        base_url: Provider API base URL; completions live under /chat/completions.
        model_name: Model identifier sent with every request.
        timeout: Seconds to wait on connect/read before giving up.
    """

    api_key: str = Field(
        default_factory=lambda: (
            os.getenv("OPENROUTER_API_KEY") or os.getenv("LLM_API_KEY", "")
        ),
        description="API key for the upstream provider",
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or DEFAULT_BASE_URL,
        description="Provider API base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("LLM_TIMEOUT", "120")),
        gt=0.0,
        description="Upstream timeout in seconds",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set OPENROUTER_API_KEY or LLM_API_KEY in .env"
            )
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Called once per request so the credential is read at call time.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return RelayConfig()
