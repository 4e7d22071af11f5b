"""Conversation state for chat with a local LLM.

Consumes streamed completion fragments into a live conversation list with
cancellation, one-active-stream enforcement and rollback of failed turns.
Requests can be grounded on the Ready documents of the ingestion tracker.
"""

from highway_assist.chat.consumer import ChatBackend, StreamingChatConsumer
from highway_assist.chat.context import analysis_announcement, document_context

__all__ = ["ChatBackend", "StreamingChatConsumer", "analysis_announcement", "document_context"]
