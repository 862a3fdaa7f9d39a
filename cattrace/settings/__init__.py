from ._core import CATConfig
from .cross_app import CrossAppTracingConfig


__all__ = ["CATConfig", "CrossAppTracingConfig"]
