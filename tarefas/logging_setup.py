from __future__ import annotations

import logging
import sys

# Third-party loggers that only matter at WARNING and above.
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "multipart")


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure process-wide logging: one stderr handler with timestamps.

    Safe to call more than once; existing root handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
