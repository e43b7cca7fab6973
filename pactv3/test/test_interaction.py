import json

import mock
import pytest

from ..exceptions import InteractionSequenceException
from ..interaction import InteractionBuilder


TEST_STATE = "a state"
TEST_DESCRIPTION = "a request"
TEST_REQUEST = {
    'method': 'post',
    'path': '/path',
    'query': {'foo': 'bar'},
    'headers': {'Custom-Header': 'value'},
    'body': {'key': 'value'}}
TEST_RESPONSE = {
    'status': 200,
    'headers': {'Custom-Header': 'value'},
    'body': {'key': 'value'}}


@pytest.fixture
def mock_engine():
    return mock.Mock()


@pytest.fixture
def builder(mock_engine):
    return InteractionBuilder(mock_engine)


@pytest.fixture
def strict_builder(mock_engine):
    return InteractionBuilder(mock_engine, strict=True)


def test_builder_creation(builder, mock_engine):
    assert builder.engine == mock_engine
    assert builder.strict is False
    assert builder.pending_states == []


def test_builder_given(builder):
    chain = builder.given(TEST_STATE)

    assert chain == builder
    assert builder.pending_states == [{'name': TEST_STATE}]


def test_builder_given_with_parameters(builder):
    builder.given(TEST_STATE, {'id': 1})

    assert builder.pending_states == [{'name': TEST_STATE, 'params': {'id': 1}}]


def test_builder_given_does_not_deduplicate(builder):
    builder.given(TEST_STATE).given(TEST_STATE)

    assert builder.pending_states == [{'name': TEST_STATE}, {'name': TEST_STATE}]


def test_builder_upon_receiving_sends_pending_states(builder, mock_engine):
    chain = (builder
        .given("state one")
        .given("state two", {'name': 'Mary'})
        .upon_receiving(TEST_DESCRIPTION))

    assert chain == builder
    mock_engine.add_interaction.assert_called_once_with(
        TEST_DESCRIPTION,
        [{'name': "state one"}, {'name': "state two", 'params': {'name': 'Mary'}}])


def test_builder_upon_receiving_keeps_pending_states(builder):
    builder.given(TEST_STATE).upon_receiving(TEST_DESCRIPTION)

    assert builder.pending_states == [{'name': TEST_STATE}]


def test_builder_with_request_serializes_body(builder, mock_engine):
    builder.upon_receiving(TEST_DESCRIPTION).with_request(**TEST_REQUEST)

    request, body = mock_engine.add_request.call_args[0]
    assert request == {
        'method': 'POST',
        'path': '/path',
        'query': {'foo': 'bar'},
        'headers': {'Custom-Header': 'value'}}
    assert json.loads(body) == {'key': 'value'}


def test_builder_with_request_without_body(builder, mock_engine):
    builder.upon_receiving(TEST_DESCRIPTION).with_request('GET', '/path')

    mock_engine.add_request.assert_called_once_with({'method': 'GET', 'path': '/path'}, None)


def test_builder_with_request_binary_file(builder, mock_engine):
    builder.upon_receiving(TEST_DESCRIPTION).with_request_binary_file(
        'PUT', '/image', 'image/png', 'cat.png')

    mock_engine.add_request_binary_file.assert_called_once_with(
        {'method': 'PUT', 'path': '/image'}, 'image/png', 'cat.png')
    assert not mock_engine.add_request.called


def test_builder_with_request_multipart_file_upload(builder, mock_engine):
    builder.upon_receiving(TEST_DESCRIPTION).with_request_multipart_file_upload(
        'POST', '/upload', 'text/csv', 'data.csv', 'file', headers={'X-Id': '1'})

    mock_engine.add_request_multipart_file_upload.assert_called_once_with(
        {'method': 'POST', 'path': '/upload', 'headers': {'X-Id': '1'}},
        'text/csv', 'data.csv', 'file')


def test_builder_will_respond_with(builder, mock_engine):
    chain = (builder
        .given(TEST_STATE)
        .upon_receiving(TEST_DESCRIPTION)
        .with_request('GET', '/path')
        .will_respond_with(**TEST_RESPONSE))

    assert chain == builder
    response, body = mock_engine.add_response.call_args[0]
    assert response == {'status': 200, 'headers': {'Custom-Header': 'value'}}
    assert json.loads(body) == {'key': 'value'}
    assert builder.pending_states == []


@pytest.mark.parametrize("respond", [
    lambda b: b.will_respond_with(200),
    lambda b: b.with_response_binary_file(200, 'application/pdf', 'doc.pdf'),
    lambda b: b.with_response_multipart_file_upload(200, 'text/plain', 'a.txt', 'file'),
])
def test_builder_response_clears_pending_states(builder, mock_engine, respond):
    builder.given("first state").upon_receiving("first").with_request('GET', '/first')
    respond(builder)

    builder.given("second state").upon_receiving("second")

    mock_engine.add_interaction.assert_called_with("second", [{'name': "second state"}])


def test_builder_with_response_binary_file(builder, mock_engine):
    (builder
        .upon_receiving(TEST_DESCRIPTION)
        .with_request('GET', '/doc')
        .with_response_binary_file(200, 'application/pdf', 'doc.pdf'))

    mock_engine.add_response_binary_file.assert_called_once_with(
        {'status': 200}, 'application/pdf', 'doc.pdf')


def test_builder_states_sent_are_a_copy(builder, mock_engine):
    builder.given(TEST_STATE).upon_receiving(TEST_DESCRIPTION)
    builder.with_request('GET', '/path').will_respond_with(200)

    assert mock_engine.add_interaction.call_args[0][1] == [{'name': TEST_STATE}]


def test_builder_permissive_second_upon_receiving_reuses_states(builder, mock_engine):
    builder.given(TEST_STATE).upon_receiving("first").upon_receiving("second")

    assert mock_engine.add_interaction.call_args_list == [
        mock.call("first", [{'name': TEST_STATE}]),
        mock.call("second", [{'name': TEST_STATE}]),
    ]


def test_strict_builder_accepts_well_ordered_interactions(strict_builder, mock_engine):
    for i in range(2):
        (strict_builder
            .given(TEST_STATE)
            .upon_receiving(TEST_DESCRIPTION)
            .with_request('GET', '/path')
            .will_respond_with(200))

    assert mock_engine.add_response.call_count == 2


@pytest.mark.parametrize("declare", [
    lambda b: b.upon_receiving("desc").given(TEST_STATE),
    lambda b: b.upon_receiving("desc").upon_receiving("again"),
    lambda b: b.with_request('GET', '/path'),
    lambda b: b.upon_receiving("desc").with_request('GET', '/').with_request('GET', '/'),
    lambda b: b.upon_receiving("desc").will_respond_with(200),
    lambda b: b.will_respond_with(200),
])
def test_strict_builder_rejects_out_of_order_declarations(strict_builder, declare):
    with pytest.raises(InteractionSequenceException):
        declare(strict_builder)
