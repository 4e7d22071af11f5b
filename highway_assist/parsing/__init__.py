"""Local PDF text extraction with pypdf.

The extracted text is used to classify uploads (highway engineering vs
general) and is kept on the document record; the analysis itself runs on
the original PDF bytes.
"""

from highway_assist.parsing.pdf_parser import PDFParseError, PDFText, extract_pdf_text, looks_like_pdf

__all__ = ["PDFParseError", "PDFText", "extract_pdf_text", "looks_like_pdf"]
