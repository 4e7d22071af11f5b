"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - chat/: Streaming consumer, cancellation and rollback
    - documents/: Validation, lifecycle and progress channels
    - llm/: Ollama client, config and model catalog
    - analysis/: Gemini analyzer and findings extraction
    - parsing/: PDF text extraction

Follows single responsibility per test function. Leverages pytest-check for
multiple assertions per test.
"""
