"""Local LLM server configuration with environment variable loading.

Pydantic-based configuration for the Ollama chat client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from highway_assist.models import GenerationParams

# Load environment variables from .env file
load_dotenv()


class LLMConfig(BaseModel):
    """Configuration for the Ollama chat client.

    Attributes:
        base_url: Ollama server URL.
        default_model: Model selected when the caller names none.
        temperature: Default sampling temperature (0.0 to 1.0).
        max_length: Default maximum tokens in a generated response.
        request_timeout: Seconds before a request is abandoned.
    """

    base_url: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
        description="Ollama server URL",
    )
    default_model: str | None = Field(
        default_factory=lambda: os.getenv("OLLAMA_MODEL") or None,
        description="Model used when none is selected",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for response generation",
    )
    max_length: int = Field(
        default=2048,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("OLLAMA_TIMEOUT", "120")),
        gt=0,
        description="Request timeout in seconds",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("OLLAMA_BASE_URL must start with http:// or https://")
        return v

    def generation_params(self) -> GenerationParams:
        return GenerationParams(temperature=self.temperature, max_length=self.max_length)


def get_llm_config() -> LLMConfig:
    """Create LLM configuration from environment.

    Returns:
        Configured LLMConfig instance.
    """
    return LLMConfig()
