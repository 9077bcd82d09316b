"""
Logging setup for the loyalty API.

``setup_logging`` wires the root logger to the console and, when
``LOG_FILE`` is set, to a UTF-8 file.  Request lines come from the HTTP
middleware in ``main`` through ``log_request`` on the
``loyalty_api.access`` logger, so Uvicorn's own access logger is
turned down to warnings to avoid printing every request twice.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

access_logger = logging.getLogger("loyalty_api.access")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach console and file handlers to the root logger.

    Parameters
    ----------
    level : str
        ``LOG_LEVEL`` value such as ``"DEBUG"`` or ``"info"``.  Unknown
        names fall back to ``INFO``.
    logfile : Optional[str]
        ``LOG_FILE`` path.  Empty or ``None`` means console only.
    """
    root = logging.getLogger()
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if root.handlers:
        # Handlers already present: a second create_app() in the same
        # process, or a test runner capturing logs.
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


def log_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """Write one access line, e.g. ``GET /api/v1/users/ 200 3.1ms``."""
    access_logger.info("%s %s %s %.1fms", method, path, status_code, duration_ms)
