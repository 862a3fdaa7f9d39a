from typing import Any
from typing import Optional
from typing import Set

from ..logger import get_logger


log = get_logger(__name__)


def coerce_str(value):
    # type: (Any) -> Optional[str]
    """Convert ``value`` to a string for a collector payload.

    ``None`` stays ``None``, bytes are decoded and anything else goes through
    ``str()``. A value whose ``__str__`` raises becomes ``None``.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    try:
        return str(value)
    except Exception:
        log.debug("unable to coerce %s to a string", type(value).__name__, exc_info=True)
        return None


def int_or_none(value):
    # type: (Any) -> Optional[int]
    """
    Returns ``value`` as an ``int``, or ``None`` if it cannot be read as one.

    >>> int_or_none("12345")
    12345
    >>> int_or_none("abc") is None
    True
    >>> int_or_none(True) is None
    True
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def parse_id_set(value: str) -> Set[str]:
    """Parses a comma separated list of identifiers, e.g. ``"1#1, 42"``, into a set."""
    return {part.strip() for part in value.split(",") if part.strip()}
