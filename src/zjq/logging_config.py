"""Process-wide logging setup for the zjq command line.

Library modules only create module loggers; nothing is configured until the
CLI calls `setup_logging()`. Diagnostics go to stderr so stdout carries JSON
output only.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

_configured = False


def setup_logging(level: str = "WARNING") -> None:
    """Configure the root logger once. Later calls only adjust the level."""
    global _configured  # noqa: PLW0603
    resolved = getattr(logging, level.upper(), None)
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level}")
    if _configured:
        logging.getLogger().setLevel(resolved)
        return
    _configured = True
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stderr,
    )
