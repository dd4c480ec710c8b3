"""Logging setup shared by the API and command-line entry points."""
import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the root handler once and return the application logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )
    # urllib3 logs every retry and connection at DEBUG/INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger("fellah")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
