import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _new_id() -> str:
    return uuid.uuid4().hex


class Role(str, Enum):
    """Speaker of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ConversationMessage(BaseModel):
    """A single turn in the conversation.

    The assistant placeholder is mutated in place while a response streams in;
    its id never changes.

    Attributes:
        id: Opaque identifier, fixed at creation.
        role: Who produced the message.
        content: Message text, grows during streaming.
        created_at: Creation timestamp.
        finalized: Set once streaming ended or was cancelled.
    """

    id: str = Field(default_factory=_new_id)
    role: Role
    content: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    finalized: bool = False

    def to_wire(self) -> dict[str, str]:
        """Render the message in the chat endpoint's `{role, content}` shape."""
        return {"role": self.role.value, "content": self.content}


class GenerationParams(BaseModel):
    """Sampling parameters forwarded to the chat endpoint.

    Attributes:
        temperature: Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_length: Maximum number of tokens to generate.
    """

    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    max_length: int = Field(default=2048, ge=1)

    def to_options(self) -> dict[str, float | int]:
        return {"temperature": self.temperature, "num_predict": self.max_length}


class StreamRequest(BaseModel):
    """One in-flight chat completion request. Never persisted."""

    model: str
    context: list[ConversationMessage]
    params: GenerationParams
    cancelled: bool = False


class FrameMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str = "assistant"
    content: str | None = None


class ChatFrame(BaseModel):
    """A newline-delimited JSON frame from the chat endpoint.

    Timing and token counters sent alongside the final frame are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    model: str | None = None
    message: FrameMessage | None = None
    done: bool = False
    error: str | None = None


class ModelDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    format: str | None = None
    family: str | None = None
    families: list[str] | None = None
    parameter_size: str | None = None
    quantization_level: str | None = None


class ModelInfo(BaseModel):
    """A locally installed model as reported by the model listing endpoint."""

    model_config = ConfigDict(extra="ignore")

    name: str
    model: str | None = None
    size: int = 0
    digest: str | None = None
    details: ModelDetails | None = None
    modified_at: str | None = None


class ModelOption(BaseModel):
    """A model as offered to the user in a selector."""

    name: str
    display_name: str
    description: str


class DocumentStatus(str, Enum):
    """Lifecycle of an uploaded document."""

    PROCESSING = "processing"
    ANALYZING = "analyzing"
    READY = "ready"
    ERROR = "error"


class DocumentType(str, Enum):
    HIGHWAY = "highway-engineering"
    GENERAL = "general"


class AnalysisResult(BaseModel):
    """Outcome of an external document analysis.

    Attributes:
        success: Whether the analyzer produced an analysis.
        analysis: Free-text analysis body (or a raw failure explanation).
        compliance_score: Estimated compliance percentage.
        issues: Issues picked out of the analysis text.
        recommendations: Recommendations picked out of the analysis text.
        summary: One-line summary.
        error: Failure reason when success is False.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    analysis: str | None = None
    compliance_score: int | None = Field(default=None, ge=0, le=100)
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    summary: str | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_failure_has_no_findings(self) -> "AnalysisResult":
        """A failed analysis carries no structured findings."""
        if not self.success and (
            self.compliance_score is not None
            or self.issues
            or self.recommendations
            or self.summary is not None
        ):
            raise ValueError("failed analysis cannot carry score, issues or summary")
        return self

    @classmethod
    def failure(cls, error: str, analysis: str | None = None) -> "AnalysisResult":
        return cls(success=False, error=error, analysis=analysis)


class UploadedFile(BaseModel):
    """A file handed to the ingestion tracker.

    Attributes:
        name: Original filename.
        mime_type: Declared content type.
        content: Raw file bytes.
        size: Size in bytes, defaults to the length of content.
    """

    name: str
    mime_type: str
    content: bytes = b""
    size: int | None = Field(default=None, ge=0)

    @field_validator("mime_type", mode="before")
    @classmethod
    def normalize_mime_type(cls, v: str) -> str:
        if isinstance(v, str):
            return v.split(";")[0].strip().lower()
        return v

    @model_validator(mode="after")
    def default_size(self) -> "UploadedFile":
        if self.size is None:
            self.size = len(self.content)
        return self


class DocumentRecord(BaseModel):
    """Tracked state of one uploaded file through its analysis lifecycle."""

    id: str = Field(default_factory=_new_id)
    name: str
    size: int = Field(ge=0)
    mime_type: str
    status: DocumentStatus = DocumentStatus.PROCESSING
    progress: int | None = Field(default=0, ge=0, le=100)
    status_text: str = ""
    content: str = ""
    document_type: DocumentType = DocumentType.GENERAL
    analysis: AnalysisResult | None = None
    error_message: str | None = None
    uploaded_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.status in (DocumentStatus.READY, DocumentStatus.ERROR)


class ProgressUpdate(BaseModel):
    """One percentage/status pair delivered on a progress channel."""

    document_id: str
    progress: int = Field(ge=0, le=100)
    status: str


class RejectedFile(BaseModel):
    """A file refused at acceptance, with the reason."""

    name: str
    reason: str


class IngestionReport(BaseModel):
    """Result of ingesting a batch of files.

    Attributes:
        documents: Records created for accepted files.
        rejected: Refused files in submission order; names may repeat.
    """

    documents: list[DocumentRecord] = Field(default_factory=list)
    rejected: list[RejectedFile] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    service: str
    ollama: bool
