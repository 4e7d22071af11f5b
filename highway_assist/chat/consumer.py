"""Streaming chat consumer with in-place conversation updates.

Turns the fragment stream of a chat completion into one continuously growing
assistant message inside a live conversation list.

Behavior:

1. **One placeholder per turn** - The user message and an empty assistant
   placeholder are appended before the request is issued. Fragments are
   concatenated onto the placeholder in arrival order and listeners are
   notified after every fragment, so readers only ever see the text grow.

2. **One active stream** - Sending while a response is still streaming
   cancels the previous request first. Its placeholder keeps whatever text
   had arrived.

3. **Cancellation keeps, failure rolls back** - ``cancel()`` stops applying
   fragments and aborts the request task; the partial answer stays. Any
   failure removes the whole failed turn (placeholder and user message), so
   the conversation is exactly as it was before ``send``; the typed text is
   kept in ``failed_text`` for a manual retry.

4. **Debug fallback** - ``stream=False`` fetches the complete answer in one
   call and fills the placeholder once.

5. **Document grounding** - With a ``documents`` provider, every request is
   prefixed by one system message describing the Ready documents. The
   preamble is rebuilt per request and never stored in the conversation.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Callable, Sequence
from contextlib import aclosing
from typing import Protocol

from highway_assist.chat.context import document_context
from highway_assist.errors import InputValidationError
from highway_assist.models import (
    ConversationMessage,
    DocumentRecord,
    GenerationParams,
    Role,
    StreamRequest,
)

logger = logging.getLogger(__name__)

Listener = Callable[[list[ConversationMessage]], None]
DocumentSource = Callable[[], Sequence[DocumentRecord]]


class ChatBackend(Protocol):
    """What the consumer needs from a chat completion client."""

    def stream_chat(
        self,
        model: str,
        messages: Sequence[ConversationMessage],
        params: GenerationParams | None = None,
    ) -> AsyncGenerator[str]: ...

    async def send_message(
        self,
        model: str,
        messages: Sequence[ConversationMessage],
        params: GenerationParams | None = None,
    ) -> str: ...


class StreamingChatConsumer:
    """Owns one conversation and the request currently answering it."""

    def __init__(
        self,
        backend: ChatBackend,
        model: str | None = None,
        params: GenerationParams | None = None,
        documents: DocumentSource | None = None,
    ) -> None:
        """Initialize the consumer.

        Args:
            backend: Chat completion client (usually an OllamaClient).
            model: Default model for ``send``.
            params: Default generation parameters for ``send``.
            documents: Returns the tracked documents to ground answers on.
        """
        self._backend = backend
        self._documents = documents
        self.model = model
        self.params = params or GenerationParams()
        self.messages: list[ConversationMessage] = []
        self.last_error: str | None = None
        self.failed_text: str | None = None
        self._listeners: list[Listener] = []
        self._active: StreamRequest | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def is_streaming(self) -> bool:
        return self._active is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every conversation mutation.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.messages)

    def _context(self, user_message: ConversationMessage) -> list[ConversationMessage]:
        prior = [m for m in self.messages if m.content]
        preamble = document_context(self._documents()) if self._documents else None
        if preamble is None:
            return [*prior, user_message]
        return [preamble, *prior, user_message]

    def _rollback(self, *turn: ConversationMessage) -> None:
        ids = {m.id for m in turn}
        self.messages[:] = [m for m in self.messages if m.id not in ids]

    async def send(
        self,
        text: str,
        model: str | None = None,
        params: GenerationParams | None = None,
        stream: bool = True,
    ) -> ConversationMessage:
        """Send a user message and stream the answer into the conversation.

        Args:
            text: The user's message.
            model: Model identifier; the consumer's default if omitted.
            params: Generation parameters; the consumer's default if omitted.
            stream: False to use the one-shot debug fallback.

        Returns:
            The finalized assistant message (possibly partial if cancelled).

        Raises:
            InputValidationError: Empty message or no model selected.
            AssistError: The request failed; the turn has been rolled back.
        """
        text = text.strip()
        if not text:
            raise InputValidationError("Message cannot be empty")
        model = model or self.model
        if not model:
            raise InputValidationError("No model selected")

        if self._active is not None:
            logger.info("New message while streaming; cancelling the previous request")
            self.cancel()

        self.last_error = None
        self.failed_text = None

        user_message = ConversationMessage(role=Role.USER, content=text, finalized=True)
        placeholder = ConversationMessage(role=Role.ASSISTANT)
        request = StreamRequest(
            model=model,
            context=self._context(user_message),
            params=params or self.params,
        )

        self.messages.extend([user_message, placeholder])
        self._notify()

        if stream:
            work = self._consume_stream(request, placeholder)
        else:
            work = self._consume_once(request, placeholder)
        task = asyncio.create_task(work)
        self._active = request
        self._task = task

        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if not request.cancelled or (current is not None and current.cancelling()):
                raise
            logger.info(f"Response cancelled after {len(placeholder.content)} characters")
        except Exception as e:
            logger.warning(f"Chat request failed, rolling back turn: {e}")
            self._rollback(user_message, placeholder)
            self.last_error = str(e)
            self.failed_text = text
            raise
        finally:
            placeholder.finalized = True
            if self._active is request:
                self._active = None
                self._task = None
            self._notify()

        return placeholder

    async def _consume_stream(
        self, request: StreamRequest, placeholder: ConversationMessage
    ) -> None:
        fragments = self._backend.stream_chat(request.model, request.context, request.params)
        async with aclosing(fragments):
            async for fragment in fragments:
                if request.cancelled:
                    break
                placeholder.content += fragment
                self._notify()

    async def _consume_once(
        self, request: StreamRequest, placeholder: ConversationMessage
    ) -> None:
        content = await self._backend.send_message(
            request.model, request.context, request.params
        )
        if request.cancelled:
            return
        placeholder.content = content
        self._notify()

    def cancel(self) -> bool:
        """Stop the active response, keeping the text received so far.

        Returns:
            False if nothing was streaming.
        """
        request = self._active
        if request is None:
            return False
        request.cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        return True

    def announce(self, content: str) -> ConversationMessage:
        """Append a finalized assistant notice to the conversation.

        The notice becomes part of the history sent with later requests.
        """
        message = ConversationMessage(role=Role.ASSISTANT, content=content, finalized=True)
        if self._active is not None:
            self.messages.insert(len(self.messages) - 2, message)
        else:
            self.messages.append(message)
        self._notify()
        return message

    def clear(self) -> None:
        """Cancel any active response and start an empty conversation."""
        self.cancel()
        self.messages.clear()
        self.last_error = None
        self.failed_text = None
        self._notify()
