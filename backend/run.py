#!/usr/bin/env python3
"""
daylog server runner

Starts the API with uvicorn using HOST/APP_PORT from the environment or .env.
"""
import uvicorn

from daylog.core.config import get_settings
from daylog.core.logging_config import configure_logging


def main():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "daylog.main:app",
        host=settings.HOST or "127.0.0.1",
        port=settings.APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
