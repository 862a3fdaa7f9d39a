import math
import time as builtin_time
from types import TracebackType
from typing import Optional
from typing import Type


class Time:
    """
    References to the standard Python time functions that won't be clobbered by `freezegun`.
    """

    time = builtin_time.time
    monotonic = builtin_time.monotonic


def time_to_millis(value: Optional[float]) -> int:
    """Converts seconds to integer milliseconds, rounding halves away from zero."""
    millis = float(value or 0.0) * 1000
    return int(math.copysign(math.floor(abs(millis) + 0.5), millis))


class StopWatch(object):
    """A simple timer/stopwatch helper class.

    Not thread-safe (when a single watch is mutated by multiple threads at
    the same time). Thread-safe when used by a single thread (not shared).
    """

    def __init__(self) -> None:
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None

    def start(self):
        # type: () -> StopWatch
        """Starts the watch."""
        self._started_at = Time.monotonic()
        return self

    def elapsed(self) -> float:
        """Get how many seconds have elapsed.

        :return: Number of seconds elapsed
        :rtype: float
        """
        if self._started_at is None:
            raise RuntimeError("Can not get the elapsed time of a stopwatch if it has not been started/stopped")
        if self._stopped_at is None:
            now = Time.monotonic()
        else:
            now = self._stopped_at
        return now - self._started_at

    def __enter__(self):
        # type: () -> StopWatch
        self.start()
        return self

    def __exit__(
        self, tp: Optional[Type[BaseException]], value: Optional[BaseException], traceback: Optional[TracebackType]
    ) -> None:
        self.stop()

    def stop(self):
        # type: () -> StopWatch
        """Stops the watch."""
        if self._started_at is None:
            raise RuntimeError("Can not stop a stopwatch that has not been started")
        self._stopped_at = Time.monotonic()
        return self
