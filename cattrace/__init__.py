from ._trace.transaction import Transaction
from ._version import __version__  # noqa: F401
from .settings.cross_app import CrossAppTracingConfig


config = CrossAppTracingConfig()


__all__ = ["__version__", "config", "Transaction"]
