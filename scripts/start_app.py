#!/usr/bin/env python3
"""Run the warden API under uvicorn."""

import sys
import logfire
import uvicorn

from warden.config import Settings
from warden.util.logging import setup_logging
from warden.util.observability import configure_logfire


def main() -> int:
    """Configure logging, then serve the app; startup failures reach Logfire."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    try:
        logfire.info("Starting warden API", port=settings.port)
        uvicorn.run(
            "warden.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="info",
        )
        return 0

    except Exception as e:
        logfire.error(
            "Warden API startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
