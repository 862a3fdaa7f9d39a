from typing import Any
from typing import List
from typing import Optional

from ..constants import ROOT_SEGMENT_NAME
from ..internal.utils.formats import coerce_str
from ..internal.utils.formats import int_or_none
from ..internal.utils.time import time_to_millis
from .segment import Segment


class TransactionTrace(object):
    """Summary of one transaction sent to the collector.

    ``forced`` is derived from ``xray_session_id`` every time it is read, so
    setting or clearing the session id is always reflected.
    """

    def __init__(self, start_time: float) -> None:
        self.start_time = start_time
        self.root_segment = Segment(0.0, ROOT_SEGMENT_NAME)
        self.transaction_name: Optional[str] = None
        self.uri: Optional[str] = None
        self.guid: Optional[str] = None
        self.xray_session_id: Any = None

    @property
    def forced(self) -> bool:
        return int_or_none(self.xray_session_id) is not None

    def to_collector_array(self) -> List[Any]:
        # The layout is what the collector ingests; index 4 is reserved.
        return [
            time_to_millis(self.start_time),
            time_to_millis(self.root_segment.duration),
            coerce_str(self.transaction_name),
            coerce_str(self.uri),
            None,
            coerce_str(self.guid),
            self.forced,
        ]

    def __repr__(self):
        return "<{} name={!r} guid={!r} forced={}>".format(
            self.__class__.__name__, self.transaction_name, self.guid, self.forced
        )
