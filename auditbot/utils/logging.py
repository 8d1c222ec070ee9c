"""Logging setup using Loguru."""

import sys
from loguru import logger

from auditbot.config import settings


NO_REPO = "-"
"""``extra[repo]`` outside of a repository workflow (fleet header, CLI)."""


def setup_logging(verbose: bool | None = None) -> None:
    """
    Configure Loguru for AuditBot runs.

    Every record carries ``extra[repo]``, which ``run_workflow`` binds to the
    repository being audited. ``verbose`` overrides the VERBOSE setting
    (DEBUG vs INFO).
    """
    logger.remove()
    logger.configure(extra={"repo": NO_REPO})

    if verbose is None:
        verbose = settings.VERBOSE
    log_level = "DEBUG" if verbose else "INFO"

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<magenta>{extra[repo]}</magenta> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    logger.debug("AuditBot logging ready (level={}, npm={})", log_level, settings.NPM_BINARY)
