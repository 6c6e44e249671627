import logging
import sys
from datetime import datetime

from moneywave.utils.time import KST

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class KSTFormatter(logging.Formatter):
    """
    Stamp records in Seoul time, the clock snapshot dates and hour pools use.
    """

    def formatTime(self, record, datefmt=None):
        stamp = datetime.fromtimestamp(record.created, KST)
        if datefmt:
            return stamp.strftime(datefmt)
        return stamp.isoformat(timespec="milliseconds")


def setup_logging(level: str = "INFO") -> None:
    """
    Configure centralized application logging.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(KSTFormatter(LOG_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
    )
    # APScheduler logs every job run at INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a namespaced logger.
    """
    return logging.getLogger(name)
