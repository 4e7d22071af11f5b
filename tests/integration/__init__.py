"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests over ASGITransport
    - Streaming chat through the real Ollama client and consumer
    - Background document analysis from upload to Ready

Ollama is emulated with httpx.MockTransport; no API keys are required.
"""
