"""Logging configuration for shipin."""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: int = logging.INFO) -> None:
    """Configure stdlib logging and route structlog through it."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_secret(secret: str | None, *, visible: int = 4) -> str:
    """Render a credential safe for logs, e.g. ``key_…cdef``."""

    if not secret:
        return "<unset>"
    if len(secret) <= visible * 2:
        return "*" * len(secret)
    return f"{secret[:visible]}…{secret[-visible:]}"
