# utils/logging_config.py
import logging

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: str) -> int:
    """Map a level name to its logging constant, INFO when unknown."""
    return LEVELS.get((level or "").upper().strip(), logging.INFO)


def setup_logging(level: str = "INFO", fmt: str = DEFAULT_FORMAT) -> None:
    logging.basicConfig(level=resolve_level(level), format=fmt, force=True)
    # request lines from httpx would duplicate our own messages
    logging.getLogger("httpx").setLevel(logging.WARNING)
