"""FastAPI endpoints for Highway Assist.

Endpoints:
    - GET /health: Service health, including Ollama reachability
    - GET /models: Installed Ollama models
    - POST /documents: Upload a PDF for background analysis
    - GET /documents, GET /documents/{id}: Progress and findings
    - DELETE /documents/{id}: Stop tracking a document
"""

from highway_assist.api.app import create_app

__all__ = ["create_app"]
