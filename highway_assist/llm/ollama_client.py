"""Async client for a local Ollama inference server.

Wraps the chat, generate and model listing endpoints behind httpx and maps
transport and protocol failures onto the shared error taxonomy:

- ``httpx.RequestError`` (including timeouts) -> ServiceConnectionError
- non-2xx responses and ``error`` payloads   -> RemoteServiceError
- unparseable terminal responses              -> ProtocolError

In streaming mode each response line is one JSON frame. Malformed frames are
skipped rather than failing the whole answer, and a frame flagged ``done``
ends the sequence even if the server keeps sending bytes.
"""

import json
import logging
from collections.abc import AsyncGenerator, Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from highway_assist.errors import ProtocolError, RemoteServiceError, ServiceConnectionError
from highway_assist.llm.config import LLMConfig, get_llm_config
from highway_assist.models import ChatFrame, ConversationMessage, GenerationParams, ModelInfo

logger = logging.getLogger(__name__)


def _remote_error(response: httpx.Response) -> RemoteServiceError:
    """Build a RemoteServiceError from a failed response.

    Ollama reports failures as ``{"error": "..."}``; anything else is passed
    through with the status line.
    """
    text = response.text
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None

    if isinstance(payload, dict) and payload.get("error"):
        message = f"Ollama API error: {payload['error']}"
    else:
        message = (
            f"Ollama API error: {response.status_code} {response.reason_phrase} - {text}"
        )
    return RemoteServiceError(message, status_code=response.status_code)


def _parse_frame(line: str) -> ChatFrame | None:
    """Parse one NDJSON line, returning None for frames that must be skipped."""
    try:
        return ChatFrame.model_validate_json(line)
    except ValidationError as e:
        logger.warning(f"Skipping malformed stream frame {line[:80]!r}: {e.error_count()} errors")
        return None


class OllamaClient:
    """Client for the Ollama REST API.

    One pooled ``httpx.AsyncClient`` is shared by all calls. Use as an async
    context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        config: LLMConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport (used by tests).
        """
        self._config = config or get_llm_config()
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.request_timeout,
            transport=transport,
        )

    @property
    def config(self) -> LLMConfig:
        return self._config

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _chat_body(
        self,
        model: str,
        messages: Sequence[ConversationMessage],
        params: GenerationParams | None,
        stream: bool,
    ) -> dict[str, Any]:
        params = params or self._config.generation_params()
        return {
            "model": model,
            "messages": [m.to_wire() for m in messages],
            "stream": stream,
            "options": params.to_options(),
        }

    async def list_models(self) -> list[ModelInfo]:
        """List the models installed on the server.

        Returns:
            Installed models, possibly empty.

        Raises:
            ServiceConnectionError: Server unreachable.
            RemoteServiceError: Server answered with an error status.
            ProtocolError: Listing could not be parsed.
        """
        logger.debug("Fetching available models from Ollama")
        try:
            response = await self._client.get("/api/tags")
        except httpx.RequestError as e:
            logger.error(f"Error fetching Ollama models: {e}")
            raise ServiceConnectionError(f"Connection to Ollama failed: {e}") from e

        if response.is_error:
            raise _remote_error(response)

        try:
            data = response.json()
            models = [ModelInfo.model_validate(m) for m in data.get("models") or []]
        except (ValueError, AttributeError, ValidationError) as e:
            raise ProtocolError(f"Unexpected model listing response: {e}") from e

        logger.info(f"Available models: {[m.name for m in models]}")
        return models

    async def check_health(self) -> bool:
        """Check whether the Ollama server is running."""
        try:
            response = await self._client.get("/api/tags")
        except httpx.RequestError:
            logger.info("Ollama health check: not reachable")
            return False

        healthy = response.is_success
        logger.info(f"Ollama health check: {'healthy' if healthy else 'unhealthy'}")
        return healthy

    async def test_model(self, model: str) -> bool:
        """Run a tiny generation to verify a model actually loads and answers."""
        logger.info(f"Testing model: {model}")
        try:
            response = await self._client.post(
                "/api/generate",
                json={
                    "model": model,
                    "prompt": "Hello",
                    "stream": False,
                    "options": {"num_predict": 5},
                },
            )
        except httpx.RequestError as e:
            logger.error(f"Error testing model {model}: {e}")
            return False

        if response.is_error:
            logger.error(f"Model test failed for {model}: {response.status_code} {response.text}")
            return False
        return True

    async def stream_chat(
        self,
        model: str,
        messages: Sequence[ConversationMessage],
        params: GenerationParams | None = None,
    ) -> AsyncGenerator[str]:
        """Stream a chat completion.

        Yields content fragments in arrival order. Closing the generator
        closes the underlying response.

        Args:
            model: Model identifier.
            messages: Conversation context, oldest first.
            params: Generation parameters; config defaults if omitted.

        Yields:
            Non-empty content fragments.

        Raises:
            ServiceConnectionError: Transport failed or timed out.
            RemoteServiceError: Error status or an ``error`` frame.
        """
        body = self._chat_body(model, messages, params, stream=True)
        logger.info(f"Starting streaming chat with model {model} ({len(messages)} messages)")

        frame_count = 0
        try:
            async with self._client.stream("POST", "/api/chat", json=body) as response:
                if response.is_error:
                    await response.aread()
                    raise _remote_error(response)

                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    frame = _parse_frame(line)
                    if frame is None:
                        continue
                    frame_count += 1

                    if frame.error:
                        raise RemoteServiceError(f"Ollama API error: {frame.error}")
                    if frame.message and frame.message.content:
                        yield frame.message.content
                    elif not frame.done:
                        logger.debug("Ignoring frame without content")
                    if frame.done:
                        logger.info(f"Streaming completed after {frame_count} frames")
                        return
        except httpx.RequestError as e:
            logger.error(f"Ollama stream failed after {frame_count} frames: {e}")
            raise ServiceConnectionError(f"Connection to Ollama failed: {e}") from e

        logger.warning(f"Stream ended without a done frame after {frame_count} frames")

    async def send_message(
        self,
        model: str,
        messages: Sequence[ConversationMessage],
        params: GenerationParams | None = None,
    ) -> str:
        """Get a complete chat response in one call.

        Non-streaming alternative used for debugging.

        Returns:
            The complete response text.

        Raises:
            ServiceConnectionError: Transport failed or timed out.
            RemoteServiceError: Error status or an ``error`` payload.
            ProtocolError: Response could not be parsed.
        """
        body = self._chat_body(model, messages, params, stream=False)
        logger.info(f"Sending non-streaming message to model {model}")

        try:
            response = await self._client.post("/api/chat", json=body)
        except httpx.RequestError as e:
            logger.error(f"Ollama request failed: {e}")
            raise ServiceConnectionError(f"Connection to Ollama failed: {e}") from e

        if response.is_error:
            raise _remote_error(response)

        try:
            frame = ChatFrame.model_validate_json(response.content)
        except ValidationError as e:
            raise ProtocolError(f"Malformed chat response: {e}") from e

        if frame.error:
            raise RemoteServiceError(f"Ollama API error: {frame.error}")
        if frame.message is None:
            raise ProtocolError("Chat response is missing the message field")
        return frame.message.content or ""
