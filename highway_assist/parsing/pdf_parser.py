"""PDF text extraction using pypdf.

Extracts the text layer of uploaded documents so the tracker can classify
them before they are sent to the analyzer.
"""

import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"


class PDFText(BaseModel):
    """Text layer of a PDF file.

    Attributes:
        text: Combined text of all readable pages.
        pages: Total number of pages in the document.
    """

    text: str
    pages: int = Field(ge=0)


class PDFParseError(Exception):
    """Raised when a PDF text layer cannot be read."""


def looks_like_pdf(file_content: bytes) -> bool:
    return file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES)


def extract_pdf_text(file_content: bytes) -> PDFText:
    """Extract the text of every readable page.

    Pages that fail to extract are skipped. Scanned documents yield an empty
    text with the real page count.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFText with the combined text and page count.

    Raises:
        PDFParseError: If the content is empty, not a PDF, corrupt, or has no pages.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")
    if not looks_like_pdf(file_content):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    text_parts: list[str] = []
    for number, page in enumerate(reader.pages, start=1):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {number}: {e}")
            continue
        if page_text:
            text_parts.append(page_text)

    text = "\n\n".join(text_parts)
    if not text.strip():
        logger.info("PDF has no text layer (may be scanned/image-based)")

    return PDFText(text=text, pages=pages)
