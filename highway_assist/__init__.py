"""Highway Assist - local LLM chat and AI review of highway engineering documents.

Combines httpx for the Ollama and Gemini clients, FastAPI for the HTTP
surface, NiceGUI for the pages, and Pydantic for data validation.

Components:
    - chat: streaming conversation state with cancellation
    - documents: concurrent upload/analysis tracking with progress channels
    - llm: Ollama client and model catalog
    - analysis: Gemini analyzer and findings extraction
    - parsing: PDF text extraction
    - api: HTTP endpoints
    - ui: Web pages
"""

__version__ = "0.1.0"
