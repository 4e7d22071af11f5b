"""Model display helpers and the startup model registry."""

import logging
import re

from highway_assist.errors import AssistError
from highway_assist.llm.ollama_client import OllamaClient
from highway_assist.models import ModelInfo, ModelOption

logger = logging.getLogger(__name__)

# First match wins.
_DESCRIPTIONS: list[tuple[tuple[str, ...], str]] = [
    (("codellama", "code-llama"), "Specialized for coding tasks and programming assistance"),
    (("mistral",), "High performance instruction-following model"),
    (("qwen",), "Excellent for multilingual tasks and reasoning"),
    (("dolphin",), "Uncensored model fine-tuned for helpful responses"),
    (("neural-chat",), "Optimized for conversational AI applications"),
    (("openchat",), "High-quality open-source conversational model"),
    (("zephyr",), "Helpful assistant model for various tasks"),
]

DEFAULT_DESCRIPTION = "AI language model for text generation and conversation"


def format_model_name(model_name: str) -> str:
    """Turn ``library/neural-chat:7b`` into ``Neural Chat``."""
    base = model_name.split(":")[0].split("/")[-1]
    if not base:
        return model_name
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), re.sub(r"[-_]", " ", base))


def describe_model(model_name: str) -> str:
    name = model_name.lower()
    if "llama2" in name or "llama-2" in name:
        if "13b" in name:
            return "Large language model with 13B parameters, excellent reasoning"
        if "70b" in name:
            return "Powerful 70B parameter model for complex tasks"
        return "Fast and efficient general-purpose language model"

    for markers, description in _DESCRIPTIONS:
        if any(marker in name for marker in markers):
            return description
    return DEFAULT_DESCRIPTION


def to_option(model: ModelInfo) -> ModelOption:
    return ModelOption(
        name=model.name,
        display_name=format_model_name(model.name),
        description=describe_model(model.name),
    )


class ModelRegistry:
    """Server health and installed models, refreshed at startup and on demand.

    The presentation layer only lets the user send chat messages while
    ``healthy`` is True and a model is selected.
    """

    def __init__(self, client: OllamaClient) -> None:
        self._client = client
        self.healthy: bool = False
        self.models: list[ModelInfo] = []
        self.error: str | None = None
        self.working: dict[str, bool] = {}

    async def check_model(self, model: str) -> bool:
        """Verify that a model loads and answers, remembering the outcome."""
        self.working[model] = await self._client.test_model(model)
        return self.working[model]

    @property
    def options(self) -> list[ModelOption]:
        return [to_option(m) for m in self.models]

    def default_model(self) -> str | None:
        """Configured default if installed, else the first installed model."""
        names = [m.name for m in self.models]
        configured = self._client.config.default_model
        if configured and configured in names:
            return configured
        return names[0] if names else None

    async def refresh(self) -> bool:
        """Re-check health and reload the model list.

        Returns:
            Whether the server is healthy.
        """
        self.error = None
        self.healthy = await self._client.check_health()
        if not self.healthy:
            self.models = []
            self.error = "Ollama server is not reachable"
            return False

        try:
            self.models = await self._client.list_models()
            installed = {m.name for m in self.models}
            self.working = {k: v for k, v in self.working.items() if k in installed}
        except AssistError as e:
            logger.warning(f"Could not load model list: {e}")
            self.models = []
            self.error = str(e)

        if not self.models and self.error is None:
            self.error = "No models installed on the Ollama server"
        return self.healthy
