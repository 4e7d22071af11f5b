"""Document ingestion: validation, progress tracking and analysis hand-off."""

from highway_assist.documents.progress import ProgressChannel, ProgressRegistry
from highway_assist.documents.tracker import (
    MAX_FILE_SIZE,
    SUPPORTED_MIME_TYPES,
    DocumentAnalyzer,
    DocumentIngestionTracker,
    format_file_size,
)

__all__ = [
    "MAX_FILE_SIZE",
    "SUPPORTED_MIME_TYPES",
    "DocumentAnalyzer",
    "DocumentIngestionTracker",
    "ProgressChannel",
    "ProgressRegistry",
    "format_file_size",
]
