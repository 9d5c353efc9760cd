"""Shared telemetry: logging setup."""

from app.shared.telemetry.logging import SECURITY_LOGGER_NAME, setup_logging

__all__ = [
    "SECURITY_LOGGER_NAME",
    "setup_logging",
]
