import contextvars
import random
from typing import Any
from typing import Callable
from typing import Dict
from typing import List
from typing import NamedTuple
from typing import Optional
from typing import TypeVar

from ..internal.logger import get_logger
from ..internal.utils.time import Time
from .segment import ExternalRequestSegment
from .trace import TransactionTrace


log = get_logger(__name__)

T = TypeVar("T")


def _generate_guid() -> str:
    return "{:016x}".format(random.getrandbits(64))


class TransactionTimings(NamedTuple):
    """Point in time view of a transaction's timing, as reported to callers."""

    start_time: float
    queue_time_in_seconds: float
    app_time_in_seconds: float
    transaction_name: Optional[str]


class Transaction(object):
    """A unit of work traced in this process, and what it learned from or tells other applications.

    The cross application fields are written once while processing inbound
    request metadata and only read afterwards. A transaction is owned by the
    task handling it and is not shared.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        guid: Optional[str] = None,
        start_time: Optional[float] = None,
        queue_start: Optional[float] = None,
        uri: Optional[str] = None,
    ) -> None:
        self._name = name
        self.name_frozen = False
        self.ignored = False
        self.guid = guid or _generate_guid()
        self.start_time = Time.time() if start_time is None else start_time
        self.queue_start = queue_start
        self.uri = uri
        self.record_tt = False

        self.client_cross_app_id: Optional[str] = None
        self.referring_transaction_info: Any = None
        self.synthetics_payload: Any = None
        self.raw_synthetics_header: Optional[str] = None
        self.intrinsic_attributes: Dict[str, Any] = {}

        self.segments: List[ExternalRequestSegment] = []
        self.trace = TransactionTrace(self.start_time)
        self.finished = False
        self._token: Optional[contextvars.Token] = None

    @property
    def name(self) -> Optional[str]:
        return self._name

    def set_name(self, name: str) -> bool:
        """Renames the transaction unless its name was already reported to another application."""
        if self.name_frozen:
            log.debug("not renaming transaction %s to %r, its name is frozen", self.guid, name)
            return False
        self._name = name
        return True

    def freeze_name(self) -> None:
        self.name_frozen = True

    def ignore(self) -> None:
        self.ignored = True

    def freeze_name_and_execute_if_not_ignored(self, func: Callable[[], T]) -> Optional[T]:
        self.freeze_name()
        if self.ignored:
            return None
        return func()

    @property
    def timings(self) -> TransactionTimings:
        queue_time = 0.0
        if self.queue_start is not None:
            queue_time = max(0.0, self.start_time - self.queue_start)
        return TransactionTimings(
            start_time=self.start_time,
            queue_time_in_seconds=queue_time,
            app_time_in_seconds=Time.time() - self.start_time,
            transaction_name=self._name,
        )

    @property
    def trip_id(self) -> str:
        return self.intrinsic_attributes.get("trip_id") or self.guid

    @property
    def referring_path_hash(self) -> Optional[str]:
        return self.intrinsic_attributes.get("referring_path_hash")

    def add_segment(self, segment: ExternalRequestSegment) -> ExternalRequestSegment:
        self.segments.append(segment)
        return segment

    @property
    def current_segment(self) -> Optional[ExternalRequestSegment]:
        return self.segments[-1] if self.segments else None

    def finish(self, end_time: Optional[float] = None) -> TransactionTrace:
        """Ends the transaction and fills in its trace."""
        if not self.finished:
            end_time = Time.time() if end_time is None else end_time
            self.trace.root_segment.end(end_time - self.start_time)
            self.trace.transaction_name = self._name
            self.trace.uri = self.uri
            self.trace.guid = self.guid
            self.finished = True
        return self.trace

    def __enter__(self) -> "Transaction":
        self._token = _CAT_TRANSACTION_CONTEXTVAR.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.finish()
        if self._token is not None:
            _CAT_TRANSACTION_CONTEXTVAR.reset(self._token)
            self._token = None

    def __repr__(self):
        return "<{} name={!r} guid={!r} client_cross_app_id={!r}>".format(
            self.__class__.__name__, self._name, self.guid, self.client_cross_app_id
        )


_CAT_TRANSACTION_CONTEXTVAR: contextvars.ContextVar[Optional[Transaction]] = contextvars.ContextVar(
    "cattrace_transaction", default=None
)


class TransactionProvider(object):
    """Retrieves the transaction active in the current execution context.

    Backed by a context variable, so each thread and each asyncio task sees
    its own transaction.
    """

    def activate(self, transaction: Optional[Transaction]) -> None:
        _CAT_TRANSACTION_CONTEXTVAR.set(transaction)

    def active(self) -> Optional[Transaction]:
        return _CAT_TRANSACTION_CONTEXTVAR.get()

    def deactivate(self) -> None:
        _CAT_TRANSACTION_CONTEXTVAR.set(None)

    def __call__(self) -> Optional[Transaction]:
        return self.active()
