"""
Tests for the HTTP client.

Tests cover:
- Request paths, methods and bodies
- Every transport failure surfaces as NetworkServiceError
"""

from unittest.mock import MagicMock

import pytest
import requests

from nnviz.network.client import NetworkClient, NetworkServiceError
from nnviz.network.models import TrainingPattern


SNAPSHOT = {
    'layers': [
        {'neurons': [{'weights': None, 'value': 1.0, 'bias': 0.0}]},
        {'neurons': [{'weights': [0.5], 'value': 0.6, 'bias': -0.2}]},
    ],
    'error': 0.2,
    'epoch': 7,
}


def make_response(ok=True, status_code=200, payload=None, text='', reason='OK'):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.text = text
    response.reason = reason
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(payload=SNAPSHOT)
    return session


@pytest.fixture
def client(session):
    return NetworkClient('http://svc:8080/', session=session)


class TestRequests:
    """Tests for what the client sends."""

    def test_get_state(self, client, session):
        state = client.get_state()
        session.request.assert_called_once_with(
            'GET', 'http://svc:8080/api/network/state', json=None, timeout=None
        )
        assert state.epoch == 7
        assert state.layer_sizes == [1, 1]

    def test_train_body(self, client, session):
        client.train([TrainingPattern([0.0, 1.0], [1.0])], 500)
        session.request.assert_called_once_with(
            'POST', 'http://svc:8080/api/network/train',
            json={'patterns': [{'features': [0.0, 1.0], 'multipleExpectation': [1.0]}], 'epochs': 500},
            timeout=None,
        )

    def test_reset(self, client, session):
        client.reset()
        method, url = session.request.call_args.args
        assert (method, url) == ('POST', 'http://svc:8080/api/network/reset')

    def test_timeout_passed(self, session):
        NetworkClient('http://svc', timeout=3.0, session=session).get_state()
        assert session.request.call_args.kwargs['timeout'] == 3.0

    def test_close(self, client, session):
        client.close()
        session.close.assert_called_once()


class TestFailures:
    """Tests for error mapping."""

    def test_connection_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NetworkServiceError) as excinfo:
            client.get_state()
        assert excinfo.value.status_code is None
        assert excinfo.value.command == 'state'

    def test_timeout(self, client, session):
        session.request.side_effect = requests.Timeout("slow")
        with pytest.raises(NetworkServiceError):
            client.train([], 10)

    def test_http_error_uses_body(self, client, session):
        """A 400 carries the service's plain-text message."""
        session.request.return_value = make_response(
            ok=False, status_code=400, text="Input size mismatch in pattern 0\n", reason='BAD REQUEST'
        )
        with pytest.raises(NetworkServiceError) as excinfo:
            client.train([TrainingPattern([1.0], [1.0])], 10)
        assert excinfo.value.status_code == 400
        assert str(excinfo.value) == "HTTP 400: Input size mismatch in pattern 0"

    def test_http_error_without_body(self, client, session):
        session.request.return_value = make_response(ok=False, status_code=503, reason='Service Unavailable')
        with pytest.raises(NetworkServiceError) as excinfo:
            client.get_state()
        assert "Service Unavailable" in str(excinfo.value)

    def test_malformed_json(self, client, session):
        response = make_response()
        response.json.side_effect = ValueError("Expecting value")
        session.request.return_value = response
        with pytest.raises(NetworkServiceError):
            client.get_state()

    def test_wrong_payload_shape(self, client, session):
        session.request.return_value = make_response(payload=[1, 2, 3])
        with pytest.raises(NetworkServiceError):
            client.get_state()
