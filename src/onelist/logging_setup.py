"""Logging configuration for the onelist command."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep onelist records; let other libraries through only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "onelist" or record.name.startswith("onelist."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    console_level: int = logging.WARNING,
    log_file: Optional[Path] = None,
) -> None:
    """Configure the root logger once, early in ``main``.

    Console output goes to stderr so it never mixes with the task listing on
    stdout. With ``log_file`` set, everything down to DEBUG is also written
    there.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
