import base64
import collections
import functools
import json
import logging
import os
import uuid

import requests
from urllib3.filepost import encode_multipart_formdata

from .client import MockServerClient
from .exceptions import PactServiceException
from .result import MockServerResult


logger = logging.getLogger(__name__)

PACT_SPECIFICATION_VERSION = '3.0.0'
PACTV3_VERSION = '0.1.0'


MockServer = collections.namedtuple('MockServer', ['port', 'url', 'id'])

# test_result is None when the run could not start, test_error says why.
TestRun = collections.namedtuple('TestRun', ['test_result', 'mock_server', 'test_error'])
TestRun.__test__ = False


def _read_file(file):
    with open(file, 'rb') as f:
        return f.read()


def _encoded(content):
    # binary bodies are base64, the message Content-Type says what they hold
    return base64.b64encode(content).decode('ascii')


class MockService(object):
    """
    Interface to interact with pact mock server.

    Holds the interactions of one consumer/provider pact, loads them into
    the mock service when a test starts and writes the pact file once the
    mock service reported every interaction as matched.
    """

    def __init__(self, consumer, provider, host='localhost', port=1234, scheme='http',
                 client_cls=MockServerClient):
        self.consumer = consumer
        self.provider = provider
        self.port = port
        self.base_uri = '{}://{}:{}'.format(scheme, host, port)
        self.client = client_cls(self.base_uri)

        self.running = False
        self.mock_server = None
        self.interactions = []

    def _current_interaction(self, part):
        if not self.interactions:
            raise PactServiceException(
                "Cannot add a {} before any interaction.".format(part))
        return self.interactions[-1]

    def add_interaction(self, description, states):
        """
        Add a new interaction to the mock service.
        """
        if self.running:
            raise PactServiceException(
                "Cannot add an interaction to a running MockService.")

        self.interactions.append({
            'description': description,
            'providerStates': list(states),
        })

    def add_request(self, request, body=None):
        self._set_message('request', request, body)

    def add_request_binary_file(self, request, content_type, file):
        self._set_binary('request', request, content_type, file)

    def add_request_multipart_file_upload(self, request, content_type, file, part):
        self._set_multipart('request', request, content_type, file, part)

    def add_response(self, response, body=None):
        self._set_message('response', response, body)

    def add_response_binary_file(self, response, content_type, file):
        self._set_binary('response', response, content_type, file)

    def add_response_multipart_file_upload(self, response, content_type, file, part):
        self._set_multipart('response', response, content_type, file, part)

    def _set_message(self, part, message, body):
        message = dict(message)
        if body is not None:
            message['body'] = json.loads(body)
        self._current_interaction(part)[part] = message
        logger.debug('%s of %r set to %r', part.capitalize(),
                     self.interactions[-1]['description'], message)

    def _set_binary(self, part, message, content_type, file):
        message = dict(message)
        message['headers'] = dict(message.get('headers') or {}, **{'Content-Type': content_type})
        message['body'] = _encoded(_read_file(file))
        self._current_interaction(part)[part] = message

    def _set_multipart(self, part, message, content_type, file, part_name):
        body, multipart_type = encode_multipart_formdata({
            part_name: (os.path.basename(file), _read_file(file), content_type),
        })
        message = dict(message)
        message['headers'] = dict(message.get('headers') or {}, **{'Content-Type': multipart_type})
        message['body'] = _encoded(body)
        self._current_interaction(part)[part] = message

    def execute_test(self, test_fn):
        """
        Start the mock service, loading the interactions into the pact server.
        """
        if self.running:
            raise PactServiceException(
                "Cannot start already started MockService.")

        self.running = True
        try:
            self.client.put_interactions(self.interactions)
        except requests.RequestException as exc:
            logger.error('Could not load interactions into %s: %s', self.base_uri, exc)
            return TestRun(None, None, PactServiceException(
                "Could not start the mock service at {}: {}".format(self.base_uri, exc)))

        self.mock_server = MockServer(port=self.port, url=self.base_uri, id=uuid.uuid4().hex)
        logger.info('Mock server %s started at %s with %d interaction(s)',
                    self.mock_server.id, self.base_uri, len(self.interactions))
        return TestRun(functools.partial(test_fn, self.mock_server), self.mock_server, None)

    def _check_mock_server(self, mock_server_id):
        if self.mock_server is None or self.mock_server.id != mock_server_id:
            raise PactServiceException(
                "No running mock server with id {}.".format(mock_server_id))

    def get_test_result(self, mock_server_id):
        """
        Ask the mock service whether every interaction was matched.
        """
        self._check_mock_server(mock_server_id)
        try:
            response = self.client.get_verification()
        except requests.RequestException as exc:
            return MockServerResult(
                mock_server_error="Could not verify the mock service at {}: {}".format(
                    self.base_uri, exc))

        if response.ok:
            return MockServerResult()

        lines = [line.strip() for line in response.text.splitlines() if line.strip()]
        if not lines:
            lines = ["Verification failed with status {}".format(response.status_code)]
        return MockServerResult(mock_server_mismatches=[json.dumps({
            'mismatches': [{'type': 'InteractionMismatch', 'mismatch': line} for line in lines],
        })])

    def pact(self):
        return {
            'consumer': {
                'name': self.consumer,
            },
            'provider': {
                'name': self.provider,
            },
            'interactions': self.interactions,
            'metadata': {
                'pactSpecification': {
                    'version': PACT_SPECIFICATION_VERSION,
                },
                'pactv3': {
                    'version': PACTV3_VERSION,
                }
            }
        }

    def write_pact_file(self, mock_server_id, output_dir):
        self._check_mock_server(mock_server_id)
        if not os.path.isdir(output_dir):
            os.makedirs(output_dir)

        filename = os.path.join(output_dir, '{}-{}.json'.format(self.consumer, self.provider))
        with open(filename, 'w') as f:
            json.dump(self.pact(), f, indent=2)

        logger.info('Pact file written to %s', filename)
        return filename

    def shutdown_test(self, run):
        """
        End the mock service, clearing the interactions of the pact server.
        """
        try:
            if run.mock_server is not None:
                self.client.delete_interactions()
                logger.info('Mock server %s stopped', run.mock_server.id)
        finally:
            self.running = False
            self.mock_server = None
