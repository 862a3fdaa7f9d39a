from typing import Any
from typing import Optional

from ..internal.utils.time import StopWatch


class Segment(object):
    """A timed node of a transaction trace.

    Timestamps are seconds relative to the start of the trace.
    """

    __slots__ = ("name", "entry_timestamp", "exit_timestamp")

    def __init__(self, entry_timestamp: float, name: str) -> None:
        self.name = name
        self.entry_timestamp = entry_timestamp
        self.exit_timestamp: Optional[float] = None

    def end(self, timestamp: float) -> None:
        self.exit_timestamp = timestamp

    @property
    def duration(self) -> float:
        if self.exit_timestamp is None:
            return 0.0
        return self.exit_timestamp - self.entry_timestamp

    def __repr__(self):
        return "<{} name={!r} duration={}>".format(self.__class__.__name__, self.name, self.duration)


class ExternalRequestSegment(object):
    """Times a call made to another service and keeps what that service reported back."""

    def __init__(self, library: str, uri: Any, procedure: str) -> None:
        self.library = library
        self.uri = str(uri)
        self.procedure = procedure
        self.duration: Optional[float] = None
        self.cross_app_response = None
        self._watch = StopWatch()

    @property
    def name(self) -> str:
        return "External/{}/{}/{}".format(self.uri, self.library, self.procedure)

    def start(self) -> "ExternalRequestSegment":
        self._watch.start()
        return self

    def finish(self) -> None:
        self._watch.stop()
        self.duration = self._watch.elapsed()

    def process_response_metadata(self, response) -> None:
        self.cross_app_response = response

    @property
    def cross_app_request(self) -> bool:
        return self.cross_app_response is not None
