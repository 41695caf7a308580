"""Main application entry point."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from src.api.app import app  # noqa: E402
from src.services.config import settings  # noqa: E402
from src.services.logging import setup_server_logging  # noqa: E402

# Configure logging (with file logging)
setup_server_logging(settings.log_file)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the API server with uvicorn."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting API server on {host}:{port}...")
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
