import logging
import sys

from divecoach.config import LOG_LEVEL

LOGGER_NAME = "divecoach"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _configure(name: str, level: str) -> logging.Logger:
    """
    One stdout handler per process for the divecoach logger tree.
    Propagation is off so uvicorn's root handlers do not repeat lines.
    """
    lg = logging.getLogger(name)
    lg.setLevel(getattr(logging, level, logging.INFO))
    lg.propagate = False

    if not any(getattr(h, "_divecoach", False) for h in lg.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._divecoach = True
        lg.addHandler(handler)

    return lg


logger = _configure(LOGGER_NAME, LOG_LEVEL)


# Call-site helpers: messages carry their own "[TAG]" prefix
def log(msg):
    logger.info(msg)


def debug(msg):
    logger.debug(msg)


def warn(msg):
    logger.warning(msg)
