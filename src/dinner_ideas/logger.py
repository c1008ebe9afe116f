"""Logging setup for dinner-ideas, built on loguru."""

import sys
from contextvars import ContextVar
from typing import Optional

from loguru import logger as _logger

from .profile import Profile

current_component: ContextVar[Optional[str]] = ContextVar('current_component', default=None)
_logger_configured: bool = False


def get_logger(component: Optional[str] = None):
    """Get a logger instance with optional component context."""
    global _logger_configured

    if component:
        current_component.set(component)

    if not _logger_configured:
        _logger.remove()

        profile = Profile.current()

        # Stderr handler - only ERROR and above
        _logger.add(
            sys.stderr,
            level="ERROR",
            format="<red>{time:HH:mm:ss}</red> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan> | <level>{message}</level>",
            colorize=True,
        )

        # File handler - all logs (DEBUG and above)
        _logger.add(
            profile.log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]} | {message}",
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            enqueue=True,
        )

        _logger.configure(patcher=_add_context)
        _logger_configured = True

    return _logger.bind(component=component) if component else _logger


def _add_context(record):
    """Fill in the component for records that were not bound to one."""
    if "component" not in record["extra"]:
        record["extra"]["component"] = current_component.get() or "dinner-ideas"


logger = get_logger()

__all__ = [
    "logger",
    "get_logger",
]
