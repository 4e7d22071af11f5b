"""Pydantic models shared by the chat and document ingestion cores.

Provides type safety and validation for conversation state, wire frames,
document records and analysis results.

Models:
    - ConversationMessage: One conversation turn, mutated while streaming
    - StreamRequest: An in-flight chat completion request
    - ChatFrame: One NDJSON frame from the chat endpoint
    - DocumentRecord: One uploaded document through its lifecycle
    - AnalysisResult: Outcome of the external document analysis
"""

from highway_assist.models.schemas import (
    AnalysisResult,
    ChatFrame,
    ConversationMessage,
    DocumentRecord,
    DocumentStatus,
    DocumentType,
    FrameMessage,
    GenerationParams,
    HealthResponse,
    IngestionReport,
    ModelDetails,
    ModelInfo,
    ModelOption,
    ProgressUpdate,
    RejectedFile,
    Role,
    StreamRequest,
    UploadedFile,
)

__all__ = [
    "AnalysisResult",
    "ChatFrame",
    "ConversationMessage",
    "DocumentRecord",
    "DocumentStatus",
    "DocumentType",
    "FrameMessage",
    "GenerationParams",
    "HealthResponse",
    "IngestionReport",
    "ModelDetails",
    "ModelInfo",
    "ModelOption",
    "ProgressUpdate",
    "RejectedFile",
    "Role",
    "StreamRequest",
    "UploadedFile",
]
