"""Local LLM server access.

Responsibilities:
    - Ollama chat completions, streaming and non-streaming
    - Health checks and installed model listing
    - Model display names and descriptions for selectors

Maintains clean separation from the conversation state kept by
`highway_assist.chat`.
"""

from highway_assist.llm.config import LLMConfig, get_llm_config
from highway_assist.llm.model_catalog import ModelRegistry, describe_model, format_model_name
from highway_assist.llm.ollama_client import OllamaClient

__all__ = [
    "LLMConfig",
    "ModelRegistry",
    "OllamaClient",
    "describe_model",
    "format_model_name",
    "get_llm_config",
]
