"""Test package for Highway Assist.

Provides test coverage for all components with unit tests for isolated
logic and integration tests for workflows.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end workflow tests
    - fakes.py: Test doubles for Ollama and Gemini

External services are never contacted: HTTP clients run on
httpx.MockTransport and the analyzer is replaced by a fake.
Leverages pytest with pytest-check for soft assertions.
"""
