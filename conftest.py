"""
Shared pytest fixtures.

The certification backend is replaced by FakeBackend, patched in at
requests.Session.request, so every layer above the HTTP transport runs for
real.
"""
import json
from http import HTTPStatus
from unittest.mock import patch
from urllib.parse import urlsplit

import pytest
import requests
from rest_framework.test import APIClient

from core.backend_client import ApiSession, reset_default_session

BACKEND_URL = 'http://backend.test/api'


def make_response(status_code=200, json_data=None, content=None, content_type='application/json'):
    """Build a requests.Response as the backend would send it."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = HTTPStatus(status_code).phrase
    response.encoding = 'utf-8'
    if content is None:
        content = b'' if json_data is None else json.dumps(json_data).encode('utf-8')
    response._content = content
    response.headers['Content-Type'] = content_type
    return response


class FakeBackend:
    """
    Routes (method, path) to canned responses and records every call.

    Paths are relative to the API root, e.g. ('GET', '/farmers').
    Unrouted calls answer 404.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, status_code=200, json_data=None, content=None,
            content_type='application/json', exc=None):
        self.routes[(method.upper(), path)] = {
            'status_code': status_code,
            'json_data': json_data,
            'content': content,
            'content_type': content_type,
            'exc': exc,
        }

    def __call__(self, method, url, **kwargs):
        path = urlsplit(url).path
        if path.startswith('/api'):
            path = path[len('/api'):]
        self.calls.append({
            'method': method.upper(),
            'path': path,
            'headers': dict(kwargs.get('headers') or {}),
            'json': kwargs.get('json'),
            'timeout': kwargs.get('timeout'),
        })

        route = self.routes.get((method.upper(), path))
        if route is None:
            return make_response(404, {'error': 'Not found'})
        if route['exc'] is not None:
            raise route['exc']
        return make_response(
            route['status_code'],
            route['json_data'],
            route['content'],
            route['content_type'],
        )

    def calls_to(self, method, path):
        return [c for c in self.calls if c['method'] == method.upper() and c['path'] == path]


@pytest.fixture(autouse=True)
def backend_settings(settings):
    settings.CERTIFICATION_API_URL = BACKEND_URL
    settings.CERTIFICATION_API_TOKEN = None
    settings.CERTIFICATION_API_TIMEOUT = 30
    yield settings
    reset_default_session()


@pytest.fixture
def backend():
    """Fake certification backend behind requests.Session.request."""
    fake = FakeBackend()
    with patch('requests.Session.request', side_effect=fake):
        yield fake


@pytest.fixture
def api_session():
    """Session carrying a fixed bearer token."""
    session = ApiSession(BACKEND_URL, token_provider=lambda: 'test-token', timeout=5)
    yield session
    session.close()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()
