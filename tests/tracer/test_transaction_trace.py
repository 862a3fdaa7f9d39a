import pytest

from cattrace._trace.segment import Segment
from cattrace._trace.trace import TransactionTrace


def make_trace(**attrs):
    trace = TransactionTrace(1700000000.1234)
    trace.root_segment.end(0.013)
    for name, value in attrs.items():
        setattr(trace, name, value)
    return trace


def test_root_segment():
    trace = TransactionTrace(1.0)
    assert isinstance(trace.root_segment, Segment)
    assert trace.root_segment.name == "ROOT"
    assert trace.root_segment.entry_timestamp == 0.0
    assert trace.root_segment.duration == 0.0


@pytest.mark.parametrize(
    "xray_session_id,expected",
    [
        ("12345", True),
        (12345, True),
        (None, False),
        ("abc", False),
        ("", False),
        ("12.5", False),
        ([], False),
        (True, False),
        (False, False),
    ],
)
def test_forced(xray_session_id, expected):
    trace = TransactionTrace(1.0)
    trace.xray_session_id = xray_session_id
    assert trace.forced is expected


def test_forced_follows_session_id():
    trace = TransactionTrace(1.0)
    assert trace.forced is False
    trace.xray_session_id = "12345"
    assert trace.forced is True
    trace.xray_session_id = None
    assert trace.forced is False


def test_to_collector_array():
    trace = make_trace(transaction_name="Controller/foo", uri="/foo", guid="abc123", xray_session_id="12345")

    assert trace.to_collector_array() == [1700000000123, 13, "Controller/foo", "/foo", None, "abc123", True]


def test_to_collector_array_defaults():
    trace = TransactionTrace(0.0)

    assert trace.to_collector_array() == [0, 0, None, None, None, None, False]


@pytest.mark.parametrize(
    "attrs",
    [
        {},
        {"transaction_name": "Controller/foo", "uri": "/foo", "guid": "abc123", "xray_session_id": "1"},
        {"transaction_name": 42, "uri": b"/foo", "guid": None, "xray_session_id": "nope"},
    ],
)
def test_to_collector_array_shape(attrs):
    array = make_trace(**attrs).to_collector_array()

    assert len(array) == 7
    assert array[4] is None
    assert isinstance(array[0], int)
    assert isinstance(array[1], int)
    assert isinstance(array[6], bool)


def test_to_collector_array_coerces_strings():
    class Unprintable(object):
        def __str__(self):
            raise RuntimeError("no")

    trace = make_trace(transaction_name=42, uri=b"/foo", guid=Unprintable())

    assert trace.to_collector_array()[2:6] == ["42", "/foo", None, None]
