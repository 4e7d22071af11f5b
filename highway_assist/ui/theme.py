"""Shared page styling and navigation header."""

from nicegui import ui

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
    }

    .header { background: linear-gradient(135deg, #1e3a8a 0%, #0f766e 100%); }

    .message-user {
        background: #1e3a8a;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
</style>
"""

STATUS_COLORS = {
    "processing": "blue",
    "analyzing": "orange",
    "ready": "green",
    "error": "red",
}


def nav_header(title: str) -> None:
    with ui.row().classes("w-full header px-5 py-3 items-center"):
        ui.icon("construction").classes("text-white text-2xl")
        ui.label(title).classes("text-lg font-semibold text-white")
        ui.space()
        ui.link("Chat", "/").classes("text-white")
        ui.link("Documents", "/documents").classes("text-white")
