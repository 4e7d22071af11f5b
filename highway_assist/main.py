"""Main application entry point.

Runs FastAPI with the NiceGUI pages mounted on the same server.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Serve the API and the UI on one port.

    FastAPI handles the API routes, NiceGUI handles the pages.
    """
    import uvicorn
    from nicegui import ui

    from highway_assist.api import create_app
    from highway_assist.ui import chat_page, documents_page  # noqa: F401 - Registers the pages

    app = create_app()

    ui.run_with(
        app,
        title="Highway Assist",
        favicon="🛣️",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "highway-assist-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Highway Assist on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
