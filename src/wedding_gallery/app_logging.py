"""Logging configuration helpers."""

import logging


def configure_logging(environment: str = "local") -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("wedding_gallery")
    logger.setLevel(logging.INFO if environment == "production" else logging.DEBUG)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
