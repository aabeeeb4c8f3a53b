"""
Tests for the random-user service client.
"""

from unittest import mock

import pytest
import requests

from server.errors import UpstreamFailure
from users.randomuser import Candidate, RandomUserClient
from users.tests.fakes import SAMPLE_RESULTS, make_result


def make_session(payload=None, status=200, exc=None):
    session = mock.Mock(spec=requests.Session)
    if exc is not None:
        session.get.side_effect = exc
        return session

    response = mock.Mock()
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f'{status} Error')
    session.get.return_value = response
    return session


class TestRandomUserClient:
    def test_fetch_in_received_order(self):
        session = make_session({'results': SAMPLE_RESULTS})
        client = RandomUserClient(base_url='https://randomuser.test/api/', timeout=5, session=session)

        candidates = client.fetch(3)

        assert [c.first_name for c in candidates] == ['Ada', 'Alan', 'Grace']
        assert candidates[0] == Candidate('Ada', 'Lovelace', 'ada@example.com', 36)
        session.get.assert_called_once_with(
            'https://randomuser.test/api/', params={'results': 3}, timeout=5
        )

    def test_defaults_from_settings(self, settings):
        settings.USERS = {'RANDOM_USER_URL': 'https://users.internal/api/', 'TIMEOUT': 2}

        client = RandomUserClient(session=make_session())

        assert client.base_url == 'https://users.internal/api/'
        assert client.timeout == 2

    @pytest.mark.parametrize(
        'exc',
        [requests.Timeout('read timed out'), requests.ConnectionError('refused')],
    )
    def test_network_failures(self, exc):
        client = RandomUserClient(session=make_session(exc=exc))

        with pytest.raises(UpstreamFailure):
            client.fetch(3)

    def test_http_error(self):
        client = RandomUserClient(session=make_session({'error': 'down'}, status=503))

        with pytest.raises(UpstreamFailure):
            client.fetch(3)

    def test_invalid_json(self):
        session = make_session()
        session.get.return_value.json.side_effect = ValueError('Expecting value')
        client = RandomUserClient(session=session)

        with pytest.raises(UpstreamFailure):
            client.fetch(3)

    @pytest.mark.parametrize(
        'payload',
        [
            {},
            {'results': 'nope'},
            {'results': SAMPLE_RESULTS[:2]},
            {'results': [{'name': {'first': 'A'}}, *SAMPLE_RESULTS[:2]]},
            {'results': [make_result(age='36'), *SAMPLE_RESULTS[:2]]},
            ['not', 'an', 'object'],
        ],
    )
    def test_malformed_payloads(self, payload):
        client = RandomUserClient(session=make_session(payload))

        with pytest.raises(UpstreamFailure):
            client.fetch(3)
