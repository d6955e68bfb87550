"""Server module entry point for running with python -m server."""

import uvicorn

from chapterpress.utils.logging_config import configure_logging, get_logger
from server.server_config import DEFAULT_HOST, DEFAULT_PORT, RELOAD

logger = get_logger(__name__)

if __name__ == "__main__":
    configure_logging()

    logger.info(
        "Starting chapterpress server",
        extra={
            "host": DEFAULT_HOST,
            "port": DEFAULT_PORT,
        },
    )

    uvicorn.run(
        "server.main:app",
        host=DEFAULT_HOST,
        port=DEFAULT_PORT,
        reload=RELOAD,
        log_config=None,  # Disable uvicorn's default logging config
    )
