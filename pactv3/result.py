"""
Match results reported by the engine and the failure message built from them.
"""
import collections
import json
import logging


logger = logging.getLogger(__name__)

FAILURE_HEADER = "Test failed for the following reasons:"
TEST_CODE_FAILED = "Test code failed with an error: "
MISMATCHES_HEADER = "Mock server failed with the following mismatches: "


MockServerResult = collections.namedtuple(
    'MockServerResult', ['mock_server_error', 'mock_server_mismatches'])
MockServerResult.__new__.__defaults__ = (None, None)


class Mismatch(collections.namedtuple('Mismatch', ['type', 'path', 'description'])):
    """One expectation the mock server saw violated."""

    def format(self, index):
        if self.path:
            return "{}) {} (at {}) {}".format(index, self.type, self.path, self.description)
        return "{}) {} {}".format(index, self.type, self.description)


UNKNOWN_MISMATCH = 'Mismatch'


def _raw_mismatch(record, mismatch_type=None):
    if not isinstance(record, str):
        record = json.dumps(record, sort_keys=True, default=str)
    return Mismatch(type=mismatch_type or UNKNOWN_MISMATCH, path=None, description=record)


def parse_mismatches(mismatch_records):
    """
        Flatten the engine's mismatch records into a list of Mismatch.

        Each record is a JSON text ``{"mismatches": [{"type", "path", "mismatch"}]}``
        and may bundle several mismatches. Any other record, including one that
        cannot be decoded or whose ``mismatches`` list is empty, still counts:
        it becomes a single Mismatch holding the raw record.
    """
    mismatches = []
    for record in mismatch_records or []:
        try:
            decoded = json.loads(record)
        except (TypeError, ValueError):
            logger.warning('Undecodable mismatch record %r', record)
            mismatches.append(_raw_mismatch(record))
            continue
        if not isinstance(decoded, dict):
            mismatches.append(_raw_mismatch(record))
            continue
        items = decoded.get('mismatches')
        if not isinstance(items, list) or not items:
            mismatches.append(_raw_mismatch(record, decoded.get('type')))
            continue
        for item in items:
            if not isinstance(item, dict):
                mismatches.append(_raw_mismatch(item))
                continue
            mismatches.append(Mismatch(
                type=item.get('type') or UNKNOWN_MISMATCH,
                path=item.get('path'),
                description=item.get('mismatch'),
            ))
    return mismatches


class TestOutcome(object):
    """
        Join of the two failure channels of one test run: the exception raised
        by the test code and what the mock server reported.
    """
    __test__ = False

    def __init__(self, test_error=None, mock_server_error=None, mismatches=None):
        self.test_error = test_error
        self.mock_server_error = mock_server_error
        self.mismatches = list(mismatches or [])

    @classmethod
    def from_result(cls, result, test_error=None):
        if result is None:
            return cls(test_error=test_error)
        return cls(
            test_error=test_error,
            mock_server_error=result.mock_server_error,
            mismatches=parse_mismatches(result.mock_server_mismatches),
        )

    @property
    def failed(self):
        return bool(self.test_error is not None or self.mock_server_error or self.mismatches)

    def message(self):
        error = FAILURE_HEADER
        if self.test_error is not None:
            error += "\n\n\t" + TEST_CODE_FAILED + str(self.test_error)
        if self.mock_server_error:
            error += "\n\n\t" + self.mock_server_error
        if self.mismatches:
            error += "\n\n\t" + MISMATCHES_HEADER
            # numbering runs across every record of the run
            for index, mismatch in enumerate(self.mismatches, 1):
                error += "\n\t\t" + mismatch.format(index)
        return error

    def __repr__(self):
        return 'TestOutcome(test_error=%r, mock_server_error=%r, mismatches=%r)' % (
            self.test_error, self.mock_server_error, self.mismatches)
