"""Debug log file setup."""

import logging
import os
from pathlib import Path

from clawtutor.config.environment import Environment
from clawtutor.config.workspace import resolve_workspace_root

DEBUG_LOG_FILENAME = "app-debug.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(env: Environment, cwd: Path) -> Path | None:
    """Send clawtutor's debug log to <workspace root>/logs/app-debug.log.

    Only active when LOG_LEVEL=debug or DEBUG is set, and only once the
    workspace exists. Returns the log path, or None when nothing was
    configured.
    """
    if not env.debug_enabled:
        return None

    root = resolve_workspace_root(cwd)
    if not root.exists():
        return None

    log_path = root / "logs" / DEBUG_LOG_FILENAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger("clawtutor")
    package_logger.setLevel(logging.DEBUG)
    target = os.path.abspath(log_path)
    for existing in package_logger.handlers:
        if isinstance(existing, logging.FileHandler) and existing.baseFilename == target:
            return log_path

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    return log_path
