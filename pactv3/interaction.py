import json
import logging

from .exceptions import InteractionSequenceException


logger = logging.getLogger(__name__)

IDLE = 'idle'
DESCRIBED = 'described'
REQUESTED = 'requested'


def make_provider_state(description, parameters=None):
    state = {'name': description}
    if parameters is not None:
        state['params'] = parameters
    return state


def build_request(method, path, query=None, headers=None):
    request = {
        'method': method.upper(),
        'path': path
    }

    if query is not None:
        request['query'] = query

    if headers is not None:
        request['headers'] = headers

    return request


def build_response(status, headers=None):
    response = {
        'status': status
    }

    if headers is not None:
        response['headers'] = headers

    return response


def serialize_body(body):
    if body is None:
        return None
    return json.dumps(body)


class InteractionBuilder(object):
    """
    Builder for the interactions of one pact.

    Every declaration is forwarded to ``engine``, which owns the contract.
    The builder only keeps the provider states declared for the next
    interaction. With ``strict`` set, out of order declarations raise
    InteractionSequenceException instead of being passed through.
    """

    def __init__(self, engine, strict=False):
        self.engine = engine
        self.strict = strict

        self.states = []
        self.phase = IDLE

    @property
    def pending_states(self):
        return list(self.states)

    def _advance(self, expected, phase, action):
        if self.phase not in expected:
            message = 'Cannot {} while the interaction is {}.'.format(action, self.phase)
            if self.strict:
                raise InteractionSequenceException(message)
            logger.warning(message)
        self.phase = phase

    def given(self, provider_state, parameters=None):
        self._advance((IDLE,), IDLE, 'declare a provider state')
        self.states.append(make_provider_state(provider_state, parameters))
        logger.debug('Provider state %r pending', provider_state)
        return self

    def upon_receiving(self, description):
        self._advance((IDLE,), DESCRIBED, 'describe a new interaction')
        logger.debug('Adding interaction %r with %d provider state(s)',
                     description, len(self.states))
        self.engine.add_interaction(description, self.pending_states)
        return self

    def with_request(self, method, path, query=None, headers=None, body=None):
        self._advance((DESCRIBED,), REQUESTED, 'declare a request')
        self.engine.add_request(
            build_request(method, path, query=query, headers=headers),
            serialize_body(body))
        return self

    def with_request_binary_file(self, method, path, content_type, file,
                                 query=None, headers=None):
        self._advance((DESCRIBED,), REQUESTED, 'declare a request')
        self.engine.add_request_binary_file(
            build_request(method, path, query=query, headers=headers),
            content_type, file)
        return self

    def with_request_multipart_file_upload(self, method, path, content_type, file, part,
                                           query=None, headers=None):
        self._advance((DESCRIBED,), REQUESTED, 'declare a request')
        self.engine.add_request_multipart_file_upload(
            build_request(method, path, query=query, headers=headers),
            content_type, file, part)
        return self

    def will_respond_with(self, status, headers=None, body=None):
        self._advance((REQUESTED,), IDLE, 'declare a response')
        self.engine.add_response(build_response(status, headers=headers), serialize_body(body))
        return self._close()

    def with_response_binary_file(self, status, content_type, file, headers=None):
        self._advance((REQUESTED,), IDLE, 'declare a response')
        self.engine.add_response_binary_file(
            build_response(status, headers=headers), content_type, file)
        return self._close()

    def with_response_multipart_file_upload(self, status, content_type, file, part,
                                            headers=None):
        self._advance((REQUESTED,), IDLE, 'declare a response')
        self.engine.add_response_multipart_file_upload(
            build_response(status, headers=headers), content_type, file, part)
        return self._close()

    def _close(self):
        # the engine holds the states now, next interaction starts clean
        self.states = []
        return self
