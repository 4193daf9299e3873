"""Logging setup shared by the app and scripts.

Library modules only call ``logging.getLogger(__name__)``; entry points call
:func:`configure_logging` once on startup.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"


def configure_logging(
    level: Union[str, int] = "INFO",
    *,
    logfile: Optional[Union[str, Path]] = None,
) -> None:
    """Configure the root logger with stdout and an optional file handler.

    Args:
        level: Logging level name or int (e.g. ``"DEBUG"``, ``logging.INFO``).
        logfile: File to append logs to; ``None`` disables file output.
    """
    formatter = logging.Formatter(DEFAULT_FORMAT)
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    handlers.append(console)

    if logfile is not None:
        log_path = Path(logfile)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        root.addHandler(handler)

    logging.captureWarnings(True)
