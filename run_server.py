"""
Run the solar quote PDF service.
Serves the page templates and POST /render/cotizacion on the configured port.
"""

import uvicorn

from quote.log import setup_logger
from quote.settings import settings


def run_server():
    """Start the HTTP service on HOST:PORT (the renderer calls back on PORT)."""
    logger = setup_logger("quote", settings.LOG_LEVEL)
    logger.info("PDF service on http://localhost:%s", settings.PORT)

    uvicorn.run(
        "quote.server:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run_server()
