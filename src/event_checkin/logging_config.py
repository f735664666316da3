import logging
from datetime import datetime

import pytz


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders record timestamps in a configured timezone."""

    def __init__(self, fmt=None, datefmt=None, tz_name="UTC"):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.tz = pytz.timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        record_time = datetime.fromtimestamp(record.created, self.tz)
        return record_time.strftime(datefmt) if datefmt else record_time.isoformat()


def setup_logging(level="INFO", tz_name="UTC"):
    logger = logging.getLogger("event_checkin")
    if not logger.handlers:
        formatter = TimezoneFormatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            tz_name=tz_name,
        )

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(str(level).upper())
    return logger
