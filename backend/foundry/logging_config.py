"""
Foundry — Logging Configuration
================================

What:  One logging setup shared by the API process, the SAQ worker and the CLI.
How:   Configures the root logger with a single stdout handler (Docker
       captures stdout) and quiets chatty third-party loggers.
When:  Called once at process start (app lifespan, worker startup, CLI main).

Format: 2024-01-15T12:00:00 [INFO] foundry.routes.access [a1b2c3d4]: message
        (request id is "-" outside an HTTP request)
"""

import logging
import sys
from typing import Optional

from foundry.config import settings
from foundry.middleware.request_id import RequestIDLogFilter

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "saq", "httpx", "httpcore")


def setup_logging(level: Optional[str] = None) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    # SQL echo is opt-in through DB_ECHO
    if settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
