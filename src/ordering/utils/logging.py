"""Logging for the Ordering domain.

Handlers and renderers are configured by the application entry point;
this module only hands out loggers.
"""

import logging

import structlog

# Suppress noisy library loggers
logging.getLogger("protean").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
