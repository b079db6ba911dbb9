# furniture_backend/logging_config.py
import os
import logging
import pytz
from datetime import datetime


class TimezoneFormatter(logging.Formatter):
    """Stamps records in a fixed timezone and appends any ``context`` extra as key=value pairs."""

    def __init__(self, fmt=None, datefmt=None, timezone='UTC'):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.timezone = pytz.timezone(timezone)

    def formatTime(self, record, datefmt=None):
        record_time = datetime.fromtimestamp(record.created, self.timezone)
        return record_time.strftime(datefmt) if datefmt else record_time.isoformat()

    def format(self, record):
        message = super().format(record)
        context = getattr(record, 'context', None)
        if context:
            pairs = ' '.join(f'{key}={value}' for key, value in context.items())
            message = f'{message} | {pairs}'
        return message


def setup_logging(name=None):
    root = logging.getLogger()
    if not root.handlers:
        formatter = TimezoneFormatter(
            fmt='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
            timezone=os.environ.get('LOG_TIMEZONE', 'UTC')
        )

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)

        root.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())
        root.addHandler(handler)

    return logging.getLogger(f'furniture_backend.{name}' if name else 'furniture_backend')
