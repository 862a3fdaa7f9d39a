import re
from typing import Any

from ..internal.logger import get_logger
from ..settings.cross_app import CrossAppTracingConfig


log = get_logger(__name__)


# <account-id>#<application-id>
_CROSS_APP_ID_REGEX = re.compile(r"([0-9]+)#[0-9]+")


class TrustRegistry(object):
    """Answers whether cross application tracing is on and which callers are trusted.

    A trusted entry names either a whole account (``"1"``) or a single
    application (``"1#1"``). Identifiers are compared as given, without any
    normalization.
    """

    def __init__(self, config: CrossAppTracingConfig) -> None:
        self._config = config
        self._trusted = frozenset(config.trusted_account_ids)

    def is_enabled(self) -> bool:
        return bool(self._config.enabled)

    @staticmethod
    def is_valid_id(cross_app_id: Any) -> bool:
        return isinstance(cross_app_id, str) and _CROSS_APP_ID_REGEX.fullmatch(cross_app_id) is not None

    def is_trusted(self, cross_app_id: Any) -> bool:
        if not isinstance(cross_app_id, str):
            return False
        match = _CROSS_APP_ID_REGEX.fullmatch(cross_app_id)
        if match is None:
            log.debug("cross application id %r is malformed", cross_app_id)
            return False
        return cross_app_id in self._trusted or match.group(1) in self._trusted

    def __repr__(self):
        return "{}(enabled={}, trusted={})".format(self.__class__.__name__, self.is_enabled(), sorted(self._trusted))
