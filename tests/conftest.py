import pytest

from cattrace import Transaction
import cattrace.internal.logger
from cattrace.propagation.cross_app import CrossAppPropagator
from cattrace.propagation.obfuscation import Obfuscator
from tests.utils import ENCODING_KEY
from tests.utils import make_config


@pytest.fixture(autouse=True)
def reset_log_rate_limits():
    cattrace.internal.logger._buckets.clear()
    yield
    cattrace.internal.logger._buckets.clear()


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def propagator(config):
    return CrossAppPropagator(config)


@pytest.fixture
def obfuscator():
    return Obfuscator(ENCODING_KEY)


@pytest.fixture
def transaction():
    return Transaction(name="Controller/foo", guid="abc123", start_time=1000.0)
