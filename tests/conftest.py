"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - pdf_bytes: A small valid PDF generated in memory
    - highway_pdf: An UploadedFile named like a Schedule B document
    - analyzer: FakeAnalyzer answering with a canned successful result
    - tracker: DocumentIngestionTracker over the fake analyzer
    - ollama_handler / ollama: Real OllamaClient on an httpx.MockTransport
    - async_client: HTTPX client for API testing

No fixture touches the network.
"""

import io
from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

from highway_assist.api import create_app
from highway_assist.documents import DocumentIngestionTracker
from highway_assist.llm import OllamaClient
from highway_assist.models import UploadedFile
from tests.fakes import FakeAnalyzer, ollama_client

MODEL_LISTING = {
    "models": [
        {"name": "llama2:13b", "size": 7365960935, "digest": "abc"},
        {"name": "codellama:7b", "size": 3825819519, "digest": "def"},
    ]
}


@pytest.fixture
def pdf_bytes() -> bytes:
    """Return a one-page blank PDF.

    Returns:
        Raw bytes of a valid PDF document.
    """
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def highway_pdf(pdf_bytes: bytes) -> UploadedFile:
    """Return a valid PDF upload whose filename marks it as highway engineering."""
    return UploadedFile(name="highway_schedule.pdf", mime_type="application/pdf", content=pdf_bytes)


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def tracker(analyzer: FakeAnalyzer) -> DocumentIngestionTracker:
    return DocumentIngestionTracker(analyzer)


@pytest.fixture
def ollama_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Handler emulating a healthy Ollama server with two models installed."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json=MODEL_LISTING)
        return httpx.Response(404, json={"error": "not found"})

    return handler


@pytest.fixture
async def ollama(
    ollama_handler: Callable[[httpx.Request], httpx.Response],
) -> AsyncGenerator[OllamaClient]:
    async with ollama_client(ollama_handler) as client:
        yield client


@pytest.fixture
async def async_client(
    ollama: OllamaClient, tracker: DocumentIngestionTracker
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    app = create_app(ollama=ollama, tracker=tracker)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
