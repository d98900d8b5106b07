import logging

from core.config import LoggingConfig


def setup_logging(config: LoggingConfig) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(level=config.level.upper(), format=config.format)
