from __future__ import annotations
import logging
from rich.logging import RichHandler

LOGGER_NAME = "voicewire"

def setup_logging(level=logging.INFO, verbose: bool = False):
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    # requests' connection pool chatter is only useful when debugging
    logging.getLogger("urllib3").setLevel(logging.DEBUG if verbose else logging.WARNING)
    return log
