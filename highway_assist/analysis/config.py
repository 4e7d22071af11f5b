"""Document analyzer configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


class AnalyzerConfig(BaseModel):
    """Configuration for the Gemini document analyzer.

    An empty API key is allowed; the analyzer then reports itself unavailable
    and every analysis fails with an explanatory message.

    Attributes:
        api_key: Gemini API key.
        model_name: Gemini model identifier.
        base_url: Generative Language API root.
        temperature: Sampling temperature.
        top_k: Top-k sampling cutoff.
        top_p: Nucleus sampling cutoff.
        max_output_tokens: Maximum tokens in the analysis text.
        request_timeout: Seconds before an analysis request is abandoned.
    """

    api_key: str = Field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    model_name: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    top_k: int = Field(default=40, ge=1)
    top_p: float = Field(default=0.8, gt=0.0, le=1.0)
    max_output_tokens: int = Field(default=8192, ge=1)
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("GEMINI_TIMEOUT", "300")), gt=0
    )

    @field_validator("api_key", "model_name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")


def get_analyzer_config() -> AnalyzerConfig:
    """Create analyzer configuration from environment."""
    return AnalyzerConfig()
