class CrossAppTracingError(Exception):
    """Base class for cross application tracing errors."""


class ConfigurationMissing(CrossAppTracingError, ValueError):
    """A required argument of a public setup call was not given."""

    def __init__(self, argument):
        # type: (str) -> None
        super(ConfigurationMissing, self).__init__("Argument `%s` is required" % argument)
        self.argument = argument


class DecodeError(CrossAppTracingError, ValueError):
    """An obfuscated token is not valid base64."""


class MalformedPayload(CrossAppTracingError, ValueError):
    """A deobfuscated payload is not the JSON document the protocol expects."""


class UntrustedIdentifier(CrossAppTracingError):
    def __init__(self, cross_app_id):
        super(UntrustedIdentifier, self).__init__("invalid/non-trusted ID: %r" % (cross_app_id,))
        self.cross_app_id = cross_app_id


class EncodingFailure(CrossAppTracingError):
    """Building an outbound payload failed."""
