from .cross_app import CrossAppPropagator
from .cross_app import CrossAppResponse
from .obfuscation import Obfuscator
from .trust import TrustRegistry


__all__ = ["CrossAppPropagator", "CrossAppResponse", "Obfuscator", "TrustRegistry"]
