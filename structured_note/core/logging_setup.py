"""
Logging setup for applications embedding the note editor.

The package itself only emits records through loguru's shared ``logger``;
it never adds or removes sinks on import. Hosts call ``configure_logging``
once at startup (the editor session does so when asked to).
"""

import sys
from typing import Optional

from loguru import logger


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Replace loguru's default sink with a stderr sink at ``level``.

    Args:
        level: Minimum level for stderr output
        log_file: Optional path for an additional DEBUG-level file sink,
            rotated at 5 MB
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    if log_file:
        logger.add(log_file, level="DEBUG", rotation="5 MB", encoding="utf-8")
    logger.debug(f"Logging configured | level={level.upper()} | file={log_file or '-'}")
