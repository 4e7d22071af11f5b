"""Document ingestion endpoints.

Handles upload validation, background analysis and document lookup.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, UploadFile, status

from highway_assist.documents import DocumentIngestionTracker
from highway_assist.errors import DocumentNotFoundError, FileTooLargeError, InputValidationError
from highway_assist.models import DocumentRecord, UploadedFile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def _tracker(request: Request) -> DocumentIngestionTracker:
    return request.app.state.tracker


def _get_or_404(tracker: DocumentIngestionTracker, document_id: str) -> DocumentRecord:
    try:
        return tracker.get(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("", response_model=DocumentRecord, status_code=status.HTTP_202_ACCEPTED)
async def upload_document(
    request: Request,
    file: UploadFile,
    background_tasks: BackgroundTasks,
) -> DocumentRecord:
    """Upload a PDF and queue it for analysis.

    Args:
        file: The uploaded PDF file (multipart/form-data).

    Returns:
        The new DocumentRecord in Processing state.

    Raises:
        400: Unsupported file type, missing filename or empty file.
        413: File exceeds the size limit.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    tracker = _tracker(request)
    content = await file.read()
    upload = UploadedFile(
        name=file.filename,
        mime_type=file.content_type or "application/octet-stream",
        content=content,
    )

    try:
        record = tracker.accept(upload)
    except FileTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=str(e),
        ) from e
    except InputValidationError as e:
        logger.info(f"Rejected upload {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    background_tasks.add_task(tracker.process, record.id)
    return record


@router.get("", response_model=list[DocumentRecord])
async def list_documents(request: Request) -> list[DocumentRecord]:
    """List tracked documents, newest first."""
    return list(_tracker(request).documents)


@router.get("/{document_id}", response_model=DocumentRecord)
async def get_document(request: Request, document_id: str) -> DocumentRecord:
    return _get_or_404(_tracker(request), document_id)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(request: Request, document_id: str) -> None:
    """Stop tracking a document; a running analysis result is discarded."""
    if not _tracker(request).remove(document_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {document_id} not found",
        )
