"""
Logging helpers for the Task Manager
"""
import logging
import sys
from typing import Any, Optional

from ..config import get_settings

logger = logging.getLogger("taskmanager")

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a single console handler.

    Safe to call more than once; only the first call installs handlers.
    """
    global _configured
    if _configured:
        return

    settings = get_settings()
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)

    # SQL echo is controlled by settings.echo_sql, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.captureWarnings(True)
    _configured = True


def log_error(error: Any, context: str, user_id: Optional[Any] = None) -> None:
    """
    Log an error with its context.

    Development logs the full details (and traceback for exceptions);
    production logs the message only.
    """
    message = getattr(error, "message", None) or str(error)
    if get_settings().is_development:
        error_type = getattr(error, "type", None)
        logger.error(
            "Application error in %s: type=%s message=%s code=%s user=%s details=%s",
            context,
            getattr(error_type, "value", error_type) or type(error).__name__,
            message,
            getattr(error, "code", None),
            user_id,
            getattr(error, "details", None),
            exc_info=error if isinstance(error, BaseException) else None,
        )
    else:
        logger.error("Error in %s: %s", context, message)
