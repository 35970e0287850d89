import logging
import sys
from typing import Optional

from flowgen.config import LOG_LEVEL


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the service (stdout, one handler)."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level or LOG_LEVEL)
    root_logger.addHandler(handler)

    # requests is chatty at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
