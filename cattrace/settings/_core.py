from collections import ChainMap
import os
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

from envier import Env


class CATConfig(Env):
    """Loads configuration from the process environment, or only from ``source`` when one is given.

    An explicit ``source`` is never mixed with ``os.environ``, so two
    configurations built from different sources stay independent of each
    other and of whatever the process exported.
    """

    def __init__(
        self,
        source: Optional[Dict[str, str]] = None,
        parent: Optional["Env"] = None,
        dynamic: Optional[Dict[str, str]] = None,
    ) -> None:
        if source is None:
            full_source = os.environ
        else:
            # envier falls back to os.environ for an empty mapping
            full_source = _ExplicitSource(source)

        super().__init__(source=full_source, parent=parent, dynamic=dynamic)


class _ExplicitSource(ChainMap):
    def __bool__(self) -> bool:
        return True
