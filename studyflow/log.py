## Logging setup for library consumers
import logging

from studyflow.settings import settings

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach one stream handler to the ``studyflow`` logger.

    Safe to call more than once; later calls only change the level.
    """
    logger = logging.getLogger("studyflow")
    logger.setLevel((level or settings.log_level).upper())

    if not any(getattr(h, "_studyflow", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._studyflow = True
        logger.addHandler(handler)

    return logger
