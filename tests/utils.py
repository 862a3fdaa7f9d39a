from cattrace.settings.cross_app import CrossAppTracingConfig


ENCODING_KEY = "abc"


def make_config(**overrides):
    """Builds a configuration for tests; a ``None`` override removes the setting."""
    source = {
        "CAT_ENCODING_KEY": ENCODING_KEY,
        "CAT_CROSS_PROCESS_ID": "9#9",
        "CAT_TRUSTED_ACCOUNT_IDS": "1#1",
    }
    source.update(overrides)
    return CrossAppTracingConfig(source={k: v for k, v in source.items() if v is not None})
