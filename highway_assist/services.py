"""Process-wide clients and state shared by the API and the UI pages.

HTTP clients hold connection pools, so one instance of each is shared by the
API and every UI page rather than recreated per request. The document
tracker is shared the same way, so uploads made through the API, the
dashboard and the chat page all see one document list.
"""

from highway_assist.analysis import GeminiAnalyzer
from highway_assist.documents import DocumentIngestionTracker
from highway_assist.llm import OllamaClient

_ollama_client: OllamaClient | None = None
_analyzer: GeminiAnalyzer | None = None
_tracker: DocumentIngestionTracker | None = None


def get_ollama_client() -> OllamaClient:
    """Get or create the global Ollama client."""
    global _ollama_client
    if _ollama_client is None:
        _ollama_client = OllamaClient()
    return _ollama_client


def get_analyzer() -> GeminiAnalyzer:
    """Get or create the global Gemini analyzer."""
    global _analyzer
    if _analyzer is None:
        _analyzer = GeminiAnalyzer()
    return _analyzer


def get_tracker() -> DocumentIngestionTracker:
    """Get or create the global document tracker over the shared analyzer."""
    global _tracker
    if _tracker is None:
        _tracker = DocumentIngestionTracker(get_analyzer())
    return _tracker


async def close_services() -> None:
    """Close the global clients, if they were created."""
    global _ollama_client, _analyzer, _tracker
    _tracker = None
    if _ollama_client is not None:
        await _ollama_client.aclose()
        _ollama_client = None
    if _analyzer is not None:
        await _analyzer.aclose()
        _analyzer = None
