"""
Logging utilities for internal use.

Usage:
    from cattrace.internal.logger import get_logger
    log = get_logger(__name__)

    log.error("error processing request metadata: invalid/non-trusted ID: %r", cross_app_id)

Every logger returned by ``get_logger`` carries a rate limiting filter: a given
call site (pathname and line number) emits at most one record per
``CAT_TRACE_LOGGING_RATE`` seconds (default 60). Records dropped in between are
counted and reported on the next record that gets through, e.g.::

    ERROR error during process_request_metadata [3 skipped]

``CAT_TRACE_LOGGING_RATE=0`` disables rate limiting altogether, and loggers set
to ``DEBUG`` are never limited.
"""

import collections
import logging
import os
import time
from typing import DefaultDict
from typing import Tuple


SECOND = 1
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve or create a ``Logger`` instance with consistent behavior for internal use.

    Configure all loggers with a rate limiter filter to prevent excessive logging.
    """
    logger = logging.getLogger(name)
    # addFilter will only add the filter if it is not already present
    logger.addFilter(log_filter)
    logger.propagate = True
    return logger


# Keeps track of a call site's current time bucket and the number of log lines skipped
class LoggingBucket:
    def __init__(self, bucket: float, skipped: int):
        self.bucket = bucket
        self.skipped = skipped

    def __repr__(self):
        return f"LoggingBucket({self.bucket}, {self.skipped})"

    def is_sampled(self, record: logging.LogRecord, rate: float) -> bool:
        current = time.monotonic()
        if current - self.bucket >= rate:
            self.bucket = current
            record.skipped = self.skipped
            self.skipped = 0
            return True
        self.skipped += 1
        return False


_MINF = float("-inf")

_buckets: DefaultDict[Tuple[str, int], LoggingBucket] = collections.defaultdict(lambda: LoggingBucket(_MINF, 0))

_rate_limit = int(os.getenv("CAT_TRACE_LOGGING_RATE", default=60))


def log_filter(record: logging.LogRecord) -> bool:
    """
    Function used to determine if a log record should be outputted or not (True = output, False = skip).
    """
    logger = logging.getLogger(record.name)
    if not _rate_limit or logger.getEffectiveLevel() == logging.DEBUG:
        return True
    return _buckets[(record.pathname, record.lineno)].is_sampled(record, _rate_limit)


class CATFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        skipped = getattr(record, "skipped", 0)
        skip_str = f" [{skipped} skipped]" if skipped else ""
        return f"{record.levelname} {super().format(record)}{skip_str}"


# setup the default formatter for all cattrace loggers
root_logger = logging.getLogger("cattrace")
if not root_logger.handlers:
    root_logger.addHandler(logging.StreamHandler())
    root_logger.handlers[0].setFormatter(CATFormatter())
root_logger.propagate = True
