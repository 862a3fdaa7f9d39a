import mock

from cattrace.settings import CrossAppTracingConfig
from tests.utils import make_config


def test_defaults():
    with mock.patch.dict("os.environ", {}, clear=True):
        config = CrossAppTracingConfig()

    assert config._enabled is True
    assert config.encoding_key is None
    assert config.cross_process_id is None
    assert config.trusted_account_ids == set()
    assert config.app_name == "python-application"
    assert config.enabled is False


def test_source():
    with mock.patch.dict("os.environ", {}, clear=True):
        config = CrossAppTracingConfig(
            source={
                "CAT_ENCODING_KEY": "abc",
                "CAT_CROSS_PROCESS_ID": "9#9",
                "CAT_TRUSTED_ACCOUNT_IDS": "1#1, 2,,3#4 ",
            }
        )

    assert config.enabled is True
    assert config.encoding_key == "abc"
    assert config.cross_process_id == "9#9"
    assert config.trusted_account_ids == {"1#1", "2", "3#4"}


def test_environment():
    env = {
        "CAT_ENCODING_KEY": "from-env",
        "CAT_TRUSTED_ACCOUNT_IDS": "7",
        "CAT_APP_NAME": "billing",
    }
    with mock.patch.dict("os.environ", env, clear=True):
        config = CrossAppTracingConfig()

    assert config.encoding_key == "from-env"
    assert config.trusted_account_ids == {"7"}
    assert config.app_name == "billing"
    assert config.enabled is True


def test_injected_source_ignores_environment():
    env = {
        "CAT_ENCODING_KEY": "other",
        "CAT_CROSS_PROCESS_ID": "5#5",
        "CAT_CROSS_APPLICATION_TRACER_ENABLED": "false",
    }
    with mock.patch.dict("os.environ", env, clear=True):
        config = make_config()
        without_id = make_config(CAT_CROSS_PROCESS_ID=None)
        empty = CrossAppTracingConfig(source={})

    assert config.encoding_key == "abc"
    assert config.cross_process_id == "9#9"
    assert config.enabled is True
    # settings missing from the injected source take their defaults
    assert without_id.cross_process_id is None
    assert empty.encoding_key is None
    assert empty.enabled is False


def test_disabled_flag():
    with mock.patch.dict("os.environ", {}, clear=True):
        config = CrossAppTracingConfig(
            source={"CAT_ENCODING_KEY": "abc", "CAT_CROSS_APPLICATION_TRACER_ENABLED": "false"}
        )

    assert config.enabled is False


def test_configs_are_isolated():
    with mock.patch.dict("os.environ", {}, clear=True):
        first = CrossAppTracingConfig(source={"CAT_ENCODING_KEY": "abc"})
        second = CrossAppTracingConfig()

    assert first.enabled is True
    assert second.enabled is False
