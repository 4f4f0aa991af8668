"""
Logging utilities for the sqlplotter package.

Library Logging Conventions
---------------------------
1. **Library code should NEVER call configure_logging()** - only use get_logger(__name__).
2. **The viewer app and scripts CAN call configure_logging()** - to configure log output.
3. When sqlplotter is imported by an application that has configured logging,
   all sqlplotter logs automatically use that application's handlers.

sqlplotter does NOT write any log files.

Example Usage
-------------
In library code (plot_orchestrator.py, canvas_pool.py, etc.):
    ```python
    from sqlplotter.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.info("Canvas acquired")
    ```

In the viewer app or standalone scripts:
    ```python
    from sqlplotter.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "sqlplotter"
LOG_LEVEL_ENV_VAR = "SQLPLOTTER_LOG_LEVEL"

# Default format for sqlplotter logs
DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the sqlplotter logger only (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to SQLPLOTTER_LOG_LEVEL
        env var, or "INFO" if unset.
    fmt:
        Log message format. Defaults to a standard format.
    datefmt:
        Date format. Defaults to "%Y-%m-%d %H:%M:%S".
    force:
        If True, remove existing handlers before adding new ones (allows
        reconfiguration). If False, skip if handler already present.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        # Skip if we already have a stderr handler (e.g. from previous configure_logging)
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name.

    If name is None, returns the 'sqlplotter' logger.
    Otherwise, returns logging.getLogger(name).
    """
    if name is None:
        name = ROOT_LOGGER_NAME
    return logging.getLogger(name)
