"""External document analysis.

Responsibilities:
    - Gemini analysis of uploaded PDFs, extracted text and questions
    - Highway engineering vs general document detection
    - Best-effort recovery of score, issues and recommendations from text
"""

from highway_assist.analysis.config import AnalyzerConfig, get_analyzer_config
from highway_assist.analysis.enrichment import detect_document_type, enrich
from highway_assist.analysis.gemini_client import GeminiAnalyzer

__all__ = [
    "AnalyzerConfig",
    "GeminiAnalyzer",
    "detect_document_type",
    "enrich",
    "get_analyzer_config",
]
