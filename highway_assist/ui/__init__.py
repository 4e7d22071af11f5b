"""NiceGUI interface - thin presentation layer over the chat and document cores.

Responsibilities:
    - Chat with streaming updates, cancellation and model selection
    - PDF upload with per-document progress and analysis findings

Contains no business logic. Pages subscribe to the cores' change
notifications and re-render.
"""
