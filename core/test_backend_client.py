"""
Tests for the certification backend client and API session.
"""
import pytest
import requests

from core.backend_client import (
    ApiSession,
    BackendClient,
    BackendError,
    bearer_token_from_request,
    get_default_session,
    is_error,
    normalize_envelope,
    reset_default_session,
)

BACKEND_URL = 'http://backend.test/api'


class TestNormalizeEnvelope:

    def test_wrapped_payload(self):
        envelope = normalize_envelope({'data': [{'id': '1'}, {'id': '2'}], 'total': 40, 'page': 1})
        assert envelope.kind == 'wrapped'
        assert envelope.data == [{'id': '1'}, {'id': '2'}]
        assert envelope.total == 40

    def test_wrapped_payload_without_total_counts_items(self):
        envelope = normalize_envelope({'data': [{'id': '1'}]})
        assert envelope.kind == 'wrapped'
        assert envelope.total == 1

    def test_bare_array(self):
        envelope = normalize_envelope([{'id': '1'}])
        assert envelope.kind == 'bare'
        assert envelope.data == [{'id': '1'}]
        assert envelope.total == 1

    @pytest.mark.parametrize('payload', [None, {}, {'data': 'nope'}, 'text', 42])
    def test_unrecognised_payload_is_empty(self, payload):
        envelope = normalize_envelope(payload)
        assert envelope.data == []
        assert envelope.total == 0


class TestApiSession:

    def test_token_resolved_once_per_call(self):
        calls = []

        def provider():
            calls.append(1)
            return 'abc'

        session = ApiSession(BACKEND_URL, token_provider=provider)
        assert session.resolve_token() == 'abc'
        assert session.resolve_token() == 'abc'
        assert len(calls) == 2

    def test_no_provider_means_no_token(self):
        assert ApiSession(BACKEND_URL).resolve_token() is None

    def test_failing_provider_means_no_token(self):
        def provider():
            raise RuntimeError('identity provider down')

        assert ApiSession(BACKEND_URL, token_provider=provider).resolve_token() is None

    def test_closed_session_resolves_no_token(self):
        session = ApiSession(BACKEND_URL, token_provider=lambda: 'abc')
        session.close()
        assert session.closed
        assert session.resolve_token() is None

    def test_context_manager_closes(self):
        with ApiSession(BACKEND_URL, token_provider=lambda: 'abc') as session:
            assert session.resolve_token() == 'abc'
        assert session.closed

    def test_url_for_joins_paths(self):
        session = ApiSession('http://backend.test/api/')
        assert session.url_for('/farmers') == 'http://backend.test/api/farmers'
        assert session.url_for('farmers/1') == 'http://backend.test/api/farmers/1'

    def test_from_settings_uses_service_token(self, settings):
        settings.CERTIFICATION_API_TOKEN = 'service-token'
        session = ApiSession.from_settings()
        assert session.base_url == BACKEND_URL
        assert session.resolve_token() == 'service-token'

    def test_from_request_forwards_bearer_token(self, rf):
        request = rf.get('/api/farmers/', HTTP_AUTHORIZATION='Bearer user-token')
        assert ApiSession.from_request(request).resolve_token() == 'user-token'

    def test_bearer_token_ignores_other_schemes(self, rf):
        request = rf.get('/api/farmers/', HTTP_AUTHORIZATION='Basic dXNlcjpwYXNz')
        assert bearer_token_from_request(request) is None

    def test_default_session_rebuilt_after_reset(self):
        first = get_default_session()
        assert get_default_session() is first
        reset_default_session()
        assert first.closed
        assert get_default_session() is not first


class TestBackendClientHeaders:

    def test_bearer_header_sent_when_token_exists(self, backend, api_session):
        backend.add('GET', '/farmers/1', json_data={'id': '1'})
        BackendClient(api_session).get('/farmers/1')
        assert backend.calls[0]['headers']['Authorization'] == 'Bearer test-token'

    def test_no_authorization_header_without_token(self, backend):
        backend.add('GET', '/farmers/1', json_data={'id': '1'})
        BackendClient(ApiSession(BACKEND_URL)).get('/farmers/1')
        assert 'Authorization' not in backend.calls[0]['headers']

    def test_list_reads_bypass_caches(self, backend, api_session):
        backend.add('GET', '/farmers', json_data=[])
        BackendClient(api_session).get_list('/farmers')
        assert backend.calls[0]['headers']['Cache-Control'] == 'no-cache'

    def test_session_timeout_applied(self, backend, api_session):
        backend.add('GET', '/farmers/1', json_data={'id': '1'})
        BackendClient(api_session).get('/farmers/1')
        assert backend.calls[0]['timeout'] == 5


class TestBackendClientFailSoft:

    def test_get_returns_payload(self, backend, api_session):
        backend.add('GET', '/farmers/1', json_data={'id': '1', 'name': 'Jane'})
        assert BackendClient(api_session).get('/farmers/1') == {'id': '1', 'name': 'Jane'}

    def test_http_error_becomes_error_object(self, backend, api_session):
        backend.add('GET', '/farmers/1', status_code=500, json_data={'message': 'boom'})
        result = BackendClient(api_session).get('/farmers/1')
        assert is_error(result)
        assert result['error'] == 'HTTP 500: Internal Server Error'
        assert result['status'] == 500
        assert result['details'] == {'message': 'boom'}

    def test_post_sends_json_body(self, backend, api_session):
        backend.add('POST', '/farmers', status_code=201, json_data={'id': '9'})
        result = BackendClient(api_session).post('/farmers', {'name': 'Jane'})
        assert result == {'id': '9'}
        assert backend.calls[0]['json'] == {'name': 'Jane'}

    def test_put_error_object(self, backend, api_session):
        backend.add('PUT', '/farmers/1', status_code=404, json_data={'error': 'Farmer not found'})
        result = BackendClient(api_session).put('/farmers/1', {'name': 'x'})
        assert result['error'] == 'HTTP 404: Not Found'

    def test_network_error_becomes_error_object(self, backend, api_session):
        backend.add('GET', '/farmers/1', exc=requests.exceptions.ConnectionError('refused'))
        result = BackendClient(api_session).get('/farmers/1')
        assert result['error'].startswith('Network error')

    def test_timeout_becomes_error_object(self, backend, api_session):
        backend.add('GET', '/farmers/1', exc=requests.exceptions.Timeout())
        result = BackendClient(api_session).get('/farmers/1')
        assert result == {'error': 'Request to certification backend timed out'}

    def test_empty_body_is_empty_object(self, backend, api_session):
        backend.add('PUT', '/farmers/1', status_code=204)
        assert BackendClient(api_session).put('/farmers/1', {}) == {}

    def test_delete_returns_flag(self, backend, api_session):
        backend.add('DELETE', '/farmers/1', status_code=204)
        client = BackendClient(api_session)
        assert client.delete('/farmers/1') is True
        assert client.delete('/farmers/2') is False

    def test_delete_network_error_is_false(self, backend, api_session):
        backend.add('DELETE', '/farmers/1', exc=requests.exceptions.ConnectionError('refused'))
        assert BackendClient(api_session).delete('/farmers/1') is False


class TestBackendClientLists:

    def test_get_list_failure_is_empty_list(self, backend, api_session):
        backend.add('GET', '/farmers', status_code=503)
        assert BackendClient(api_session).get_list('/farmers') == []

    def test_get_list_returns_payload_as_sent(self, backend, api_session):
        backend.add('GET', '/farmers', json_data={'data': [{'id': '1'}], 'total': 1})
        assert BackendClient(api_session).get_list('/farmers') == {'data': [{'id': '1'}], 'total': 1}

    def test_fetch_list_distinguishes_failure_from_empty(self, backend, api_session):
        backend.add('GET', '/farmers', json_data=[])
        backend.add('GET', '/farms', status_code=500)
        client = BackendClient(api_session)

        empty = client.fetch_list('/farmers')
        failed = client.fetch_list('/farms')

        assert empty.ok and empty.items == []
        assert not failed.ok
        assert failed.error == 'HTTP 500: Internal Server Error'
        assert failed.status_code == 500

    def test_fetch_list_normalizes_envelope(self, backend, api_session):
        backend.add('GET', '/farmers', json_data={'data': [{'id': '1'}], 'total': 12})
        result = BackendClient(api_session).fetch_list('/farmers')
        assert result.items == [{'id': '1'}]
        assert result.total == 12


class TestBackendClientBinary:

    def test_get_binary_returns_content(self, backend, api_session):
        backend.add('GET', '/certificates/1/pdf', content=b'%PDF-1.4 data', content_type='application/pdf')
        content, content_type = BackendClient(api_session).get_binary('/certificates/1/pdf')
        assert content == b'%PDF-1.4 data'
        assert content_type == 'application/pdf'

    def test_get_binary_http_error_raises(self, backend, api_session):
        with pytest.raises(BackendError) as exc_info:
            BackendClient(api_session).get_binary('/certificates/404/pdf')
        assert exc_info.value.status_code == 404
        assert exc_info.value.code == 'API_ERROR'

    def test_get_binary_network_error_raises(self, backend, api_session):
        backend.add('GET', '/certificates/1/pdf', exc=requests.exceptions.ConnectionError('refused'))
        with pytest.raises(BackendError) as exc_info:
            BackendClient(api_session).get_binary('/certificates/1/pdf')
        assert exc_info.value.code == 'CONNECTION_ERROR'
