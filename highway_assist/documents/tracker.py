"""Concurrent document ingestion with per-document progress.

Each accepted file becomes a DocumentRecord that ``process`` drives through
Processing -> Analyzing -> Ready, or to Error from any state. Any number of
documents may be in flight at once on the event loop; each one's progress
only moves forward and a failure stays inside its own record.

Removal does not cancel an analyzer call that is already running. Every
record gets a generation token on acceptance, and results are only applied
while the record is still tracked under that token, so a late answer for a
removed document is dropped instead of resurrecting it.
"""

import asyncio
import base64
import itertools
import logging
from collections import Counter
from collections.abc import Callable, Iterable
from typing import Protocol

from highway_assist.analysis.enrichment import detect_document_type
from highway_assist.documents.progress import ProgressCallback, ProgressRegistry
from highway_assist.errors import (
    AssistError,
    DocumentNotFoundError,
    FileTooLargeError,
    InputValidationError,
)
from highway_assist.models import (
    AnalysisResult,
    DocumentRecord,
    DocumentStatus,
    DocumentType,
    IngestionReport,
    RejectedFile,
    UploadedFile,
)
from highway_assist.parsing import PDFParseError, extract_pdf_text

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB
SUPPORTED_MIME_TYPES = frozenset({"application/pdf"})

PREPARED_PROGRESS = 30
SUBMITTED_PROGRESS = 60

_STAGE = {
    DocumentStatus.PROCESSING: 0,
    DocumentStatus.ANALYZING: 1,
    DocumentStatus.READY: 2,
}

Listener = Callable[[list[DocumentRecord]], None]


class DocumentAnalyzer(Protocol):
    """What the tracker needs from an external analyzer."""

    async def analyze_pdf(
        self, payload_b64: str, filename: str, document_type: DocumentType = ...
    ) -> AnalysisResult: ...


def format_file_size(size: int) -> str:
    """Human-readable size, e.g. ``2.5 MB``."""
    if size == 0:
        return "0 Bytes"
    value = float(size)
    for unit in ("Bytes", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            break
        value /= 1024
    return f"{round(value, 2):g} {unit}"


class DocumentIngestionTracker:
    """Owns the document list and every document's progress channel."""

    def __init__(
        self,
        analyzer: DocumentAnalyzer,
        max_file_size: int = MAX_FILE_SIZE,
        supported_types: Iterable[str] = SUPPORTED_MIME_TYPES,
    ) -> None:
        self._analyzer = analyzer
        self.max_file_size = max_file_size
        self.supported_types = frozenset(supported_types)
        self.documents: list[DocumentRecord] = []
        self._payloads: dict[str, bytes] = {}
        self._tokens: dict[str, int] = {}
        self._started: set[str] = set()
        self._progress = ProgressRegistry()
        self._generations = itertools.count(1)
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every document list mutation."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.documents)

    def validate(self, file: UploadedFile) -> None:
        """Check type and size of a file before it is accepted.

        Raises:
            InputValidationError: Unsupported type or empty file.
            FileTooLargeError: File exceeds the maximum size.
        """
        if file.mime_type not in self.supported_types:
            raise InputValidationError(
                "Only PDF files are supported for highway engineering documents"
            )
        size = file.size or 0
        if size == 0:
            raise InputValidationError("Empty file provided")
        if size > self.max_file_size:
            raise FileTooLargeError(
                f"File size too large ({format_file_size(size)}). "
                f"Maximum size is {format_file_size(self.max_file_size)}"
            )

    def accept(
        self, file: UploadedFile, on_progress: ProgressCallback | None = None
    ) -> DocumentRecord:
        """Validate a file and start tracking it.

        Args:
            file: The uploaded file.
            on_progress: Optional callback for this document's progress channel.

        Returns:
            The new record, in Processing state at 0%.

        Raises:
            InputValidationError: The file was rejected; nothing is tracked.
        """
        self.validate(file)

        record = DocumentRecord(
            name=file.name,
            size=file.size or 0,
            mime_type=file.mime_type,
            status_text="Waiting to process...",
        )
        self._tokens[record.id] = next(self._generations)
        self._payloads[record.id] = file.content
        self.documents.insert(0, record)

        channel = self._progress.register(record.id, on_progress)
        channel.emit(0, record.status_text)
        logger.info(f"Accepted {record.name} ({format_file_size(record.size)}) as {record.id}")
        self._notify()
        return record

    def get(self, document_id: str) -> DocumentRecord:
        for record in self.documents:
            if record.id == document_id:
                return record
        raise DocumentNotFoundError(f"Document {document_id} not found")

    def _is_current(self, document_id: str, token: int) -> bool:
        return self._tokens.get(document_id) == token

    def _advance(
        self,
        record: DocumentRecord,
        token: int,
        status: DocumentStatus,
        progress: int,
        status_text: str,
    ) -> bool:
        if not self._is_current(record.id, token) or record.is_terminal:
            return False
        if _STAGE[status] < _STAGE[record.status]:
            logger.warning(f"Refusing backward transition {record.status} -> {status}")
            return False

        record.status = status
        record.progress = max(record.progress or 0, progress)
        record.status_text = status_text

        channel = self._progress.get(record.id)
        if channel is not None:
            channel.emit(progress, status_text)
        if record.is_terminal:
            self._progress.unregister(record.id)
        self._notify()
        return True

    def _fail(self, record: DocumentRecord, token: int, message: str) -> None:
        if not self._is_current(record.id, token) or record.is_terminal:
            logger.debug(f"Discarding failure for removed document {record.id}: {message}")
            return
        logger.warning(f"Processing {record.name} failed: {message}")
        record.status = DocumentStatus.ERROR
        record.error_message = message
        record.status_text = "Error"
        self._progress.unregister(record.id)
        self._notify()

    async def _prepare(self, record: DocumentRecord, token: int, payload: bytes) -> str:
        text = ""
        try:
            text = (await asyncio.to_thread(extract_pdf_text, payload)).text
        except PDFParseError as e:
            logger.warning(f"No text layer extracted from {record.name}: {e}")

        if self._is_current(record.id, token):
            record.content = text
            record.document_type = detect_document_type(text, record.name)
        return base64.b64encode(payload).decode("ascii")

    async def process(self, document_id: str) -> DocumentRecord:
        """Run a document through extraction and external analysis.

        Only the first call per document does anything; later calls return
        the record unchanged.

        Returns:
            The record in its final state (Ready or Error), or as it was when
            it got removed mid-flight.

        Raises:
            DocumentNotFoundError: The id is not tracked.
        """
        record = self.get(document_id)
        if document_id in self._started or record.is_terminal:
            logger.warning(f"Document {document_id} was already processed; ignoring")
            return record

        self._started.add(document_id)
        token = self._tokens[document_id]
        payload = self._payloads.pop(document_id, b"")

        try:
            encoded = await self._prepare(record, token, payload)
            if not self._advance(
                record, token, DocumentStatus.PROCESSING, PREPARED_PROGRESS,
                "Preparing PDF upload...",
            ):
                return record
            self._advance(
                record, token, DocumentStatus.ANALYZING, SUBMITTED_PROGRESS,
                "Uploading to analyzer...",
            )
            result = await self._analyzer.analyze_pdf(encoded, record.name, record.document_type)
        except AssistError as e:
            self._fail(record, token, str(e))
            return record
        except Exception as e:
            logger.exception(f"Unexpected error while processing {record.name}")
            self._fail(record, token, f"Processing failed: {e}")
            return record

        if not self._is_current(document_id, token):
            logger.info(f"Discarding late analysis result for removed document {document_id}")
            return record

        if not result.success:
            self._fail(record, token, result.error or "Analysis failed")
            return record

        record.analysis = result
        self._advance(record, token, DocumentStatus.READY, 100, "Analysis complete")
        logger.info(f"Document {record.name} is ready")
        return record

    async def ingest(self, files: Iterable[UploadedFile]) -> IngestionReport:
        """Accept a batch of files and process the accepted ones concurrently."""
        report = IngestionReport()
        for file in files:
            try:
                report.documents.append(self.accept(file))
            except InputValidationError as e:
                logger.info(f"Rejected {file.name}: {e}")
                report.rejected.append(RejectedFile(name=file.name, reason=str(e)))

        await asyncio.gather(*(self.process(record.id) for record in report.documents))
        return report

    def remove(self, document_id: str) -> bool:
        """Stop tracking a document.

        An analyzer call already in flight keeps running; its result is
        discarded when it arrives.

        Returns:
            False if the id was not tracked.
        """
        if document_id not in self._tokens:
            return False

        del self._tokens[document_id]
        self._payloads.pop(document_id, None)
        self._started.discard(document_id)
        self._progress.unregister(document_id)
        self.documents[:] = [d for d in self.documents if d.id != document_id]
        logger.info(f"Removed document {document_id}")
        self._notify()
        return True

    def counts(self) -> dict[DocumentStatus, int]:
        """Number of tracked documents per status."""
        counter = Counter(d.status for d in self.documents)
        return {status: counter.get(status, 0) for status in DocumentStatus}
