import functools
import json

import mock
import pytest

from ..result import MockServerResult
from ..service import MockServer, TestRun


MOCK_SERVER = MockServer(port=1234, url='http://localhost:1234', id='abc123')


def mismatch_record(*mismatches):
    return json.dumps({'mismatches': list(mismatches)})


@pytest.fixture
def mock_engine():
    """An engine that starts every test and reports a clean mock server."""
    engine = mock.Mock()
    engine.execute_test.side_effect = lambda test_fn: TestRun(
        functools.partial(test_fn, MOCK_SERVER), MOCK_SERVER, None)
    engine.get_test_result.return_value = MockServerResult()
    return engine
