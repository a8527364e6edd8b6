import logging

from streakkeeper.core.config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Attach one console handler to the package logger (idempotent)."""
    logger = logging.getLogger("streakkeeper")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
