"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings

# Path traversal attempts, root escapes and refused uploads are logged here
SECURITY_LOGGER_NAME = "app.security"


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO. The security
    logger always emits WARNING and above so attack attempts stay visible.
    Output goes to stdout.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger(SECURITY_LOGGER_NAME).setLevel(logging.WARNING)
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
