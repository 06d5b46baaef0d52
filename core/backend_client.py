"""
Certification Backend Client

Handles all HTTP traffic to the external certification REST backend:
- Bearer token forwarding through an explicit ApiSession
- Fail-soft JSON reads and writes ({'error': ...} instead of exceptions)
- List reads that tolerate both bare arrays and {data, total} envelopes
- Binary passthrough for backend-rendered documents

Usage:
    from core.backend_client import ApiSession, BackendClient

    session = ApiSession.from_request(request)
    client = BackendClient(session)

    farmer = client.get('/farmers/42')
    if is_error(farmer):
        ...
    farmers = normalize_envelope(client.get_list('/farmers')).data
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


class BackendError(Exception):
    """Raised on backend failures that callers must handle (write paths, binary proxy)."""
    def __init__(self, message: str, code: str = None, status_code: int = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or 'BACKEND_ERROR'
        self.status_code = status_code
        self.details = details or {}


@dataclass
class Envelope:
    """
    A list payload after normalisation.

    kind is 'wrapped' when the backend answered {data: [...], total, ...}
    and 'bare' when it answered with the array itself.
    """
    kind: str
    data: List[Dict[str, Any]]
    total: int


@dataclass
class ListResult:
    """List read that keeps "zero records" and "fetch failed" apart."""
    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_error(result: Any) -> bool:
    """True when a get/post/put result is a tagged error object."""
    return isinstance(result, dict) and 'error' in result


def normalize_envelope(payload: Any) -> Envelope:
    if isinstance(payload, dict) and isinstance(payload.get('data'), list):
        data = payload['data']
        total = payload.get('total')
        if not isinstance(total, int) or isinstance(total, bool):
            total = len(data)
        return Envelope(kind='wrapped', data=data, total=total)

    if isinstance(payload, list):
        return Envelope(kind='bare', data=payload, total=len(payload))

    return Envelope(kind='bare', data=[], total=0)


def bearer_token_from_request(request) -> Optional[str]:
    header = request.META.get('HTTP_AUTHORIZATION', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() == 'bearer' and token.strip():
        return token.strip()
    return None


class ApiSession:
    """
    Explicit connection context for the certification backend.

    Holds the base URL, timeout, a pooled requests.Session and the token
    provider supplied by the identity layer. Pass it into every service call;
    call close() on logout or when the owning request finishes.
    """

    def __init__(self, base_url: str, token_provider: Optional[TokenProvider] = None,
                 timeout: int = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._token_provider = token_provider
        self._http: Optional[requests.Session] = None
        self._http_lock = threading.Lock()
        self.closed = False

    @classmethod
    def from_settings(cls, token_provider: Optional[TokenProvider] = None) -> 'ApiSession':
        if token_provider is None and settings.CERTIFICATION_API_TOKEN:
            service_token = settings.CERTIFICATION_API_TOKEN
            token_provider = lambda: service_token  # noqa: E731
        return cls(
            base_url=settings.CERTIFICATION_API_URL,
            token_provider=token_provider,
            timeout=settings.CERTIFICATION_API_TIMEOUT,
        )

    @classmethod
    def from_request(cls, request) -> 'ApiSession':
        """Session that forwards the caller's bearer token, if any."""
        token = bearer_token_from_request(request)
        if token:
            return cls.from_settings(token_provider=lambda: token)
        return cls.from_settings()

    @property
    def http(self) -> requests.Session:
        # Service calls may share one session across worker threads
        if self._http is None:
            with self._http_lock:
                if self._http is None:
                    self._http = requests.Session()
        return self._http

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def resolve_token(self) -> Optional[str]:
        """Ask the identity layer for the current token, once per call."""
        if self.closed or self._token_provider is None:
            return None
        try:
            token = self._token_provider()
        except Exception as e:
            logger.warning(f"Token provider failed, continuing without Authorization header: {e}")
            return None
        return token or None

    def close(self) -> None:
        """Tear the session down; afterwards no token is attached to requests."""
        with self._http_lock:
            if self._http is not None:
                self._http.close()
                self._http = None
        self._token_provider = None
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


_default_session: Optional[ApiSession] = None


def get_default_session() -> ApiSession:
    """Process-wide session built from settings on first use."""
    global _default_session
    if _default_session is None or _default_session.closed:
        _default_session = ApiSession.from_settings()
    return _default_session


def reset_default_session() -> None:
    global _default_session
    if _default_session is not None:
        _default_session.close()
    _default_session = None


class BackendClient:
    """Thin JSON client over an ApiSession."""

    def __init__(self, session: ApiSession):
        self.session = session

    def _get_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        }
        token = self.session.resolve_token()
        if token:
            headers['Authorization'] = f'Bearer {token}'
        if extra:
            headers.update(extra)
        return headers

    def _send(self, method: str, endpoint: str, data: Any = None,
              headers: Optional[Dict[str, str]] = None) -> requests.Response:
        return self.session.http.request(
            method=method,
            url=self.session.url_for(endpoint),
            headers=self._get_headers(headers),
            json=data,
            timeout=self.session.timeout,
        )

    @staticmethod
    def _http_error(response: requests.Response) -> Dict[str, Any]:
        try:
            details = response.json()
        except ValueError:
            details = None
        return {
            'error': f"HTTP {response.status_code}: {response.reason}",
            'status': response.status_code,
            'details': details,
        }

    def _request_json(self, method: str, endpoint: str, data: Any = None,
                      headers: Optional[Dict[str, str]] = None) -> Any:
        """
        Make a JSON request to the backend.

        Returns:
            Parsed JSON body, or {'error': ...} on HTTP or transport failure
        """
        try:
            response = self._send(method, endpoint, data, headers)
        except requests.exceptions.Timeout:
            logger.error(f"Certification API timeout: {method} {endpoint}")
            return {'error': 'Request to certification backend timed out'}
        except requests.exceptions.RequestException as e:
            logger.error(f"Certification API connection error: {method} {endpoint}: {e}")
            return {'error': f'Network error: {e}'}

        if not response.ok:
            result = self._http_error(response)
            logger.warning(f"Certification API error: {result['error']}", extra={
                'endpoint': endpoint,
                'method': method,
                'status_code': response.status_code,
            })
            return result

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            logger.error(f"Certification API returned invalid JSON: {method} {endpoint}")
            return {'error': 'Invalid JSON response from certification backend'}

    def get(self, endpoint: str) -> Any:
        return self._request_json('GET', endpoint)

    def post(self, endpoint: str, data: Any = None) -> Any:
        return self._request_json('POST', endpoint, data if data is not None else {})

    def put(self, endpoint: str, data: Any = None) -> Any:
        return self._request_json('PUT', endpoint, data if data is not None else {})

    def delete(self, endpoint: str) -> bool:
        try:
            response = self._send('DELETE', endpoint)
        except requests.exceptions.RequestException as e:
            logger.error(f"Certification API connection error: DELETE {endpoint}: {e}")
            return False

        if not response.ok:
            logger.warning(f"Certification API error: HTTP {response.status_code}: {response.reason}", extra={
                'endpoint': endpoint,
                'method': 'DELETE',
                'status_code': response.status_code,
            })
        return response.ok

    def fetch_list(self, endpoint: str) -> ListResult:
        """Fresh (uncached) list read with an explicit failure variant."""
        result = self._request_json('GET', endpoint, headers={
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        })
        if is_error(result):
            return ListResult(error=result['error'], status_code=result.get('status'))

        envelope = normalize_envelope(result)
        return ListResult(items=envelope.data, total=envelope.total)

    def get_list(self, endpoint: str) -> Any:
        """
        Fresh list read that collapses every failure to [].

        The payload is returned as sent (bare array or envelope); pass it
        through normalize_envelope() before use.
        """
        result = self._request_json('GET', endpoint, headers={
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        })
        if is_error(result):
            return []
        return result

    def get_binary(self, endpoint: str) -> Tuple[bytes, str]:
        """
        Fetch a binary document (e.g. a backend-rendered certificate PDF).

        Raises:
            BackendError: On HTTP or transport failure
        """
        headers = self._get_headers({'Accept': '*/*'})
        headers.pop('Content-Type', None)
        try:
            response = self.session.http.get(
                self.session.url_for(endpoint),
                headers=headers,
                timeout=self.session.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Certification API connection error: GET {endpoint}: {e}")
            raise BackendError(
                message="Unable to connect to certification backend",
                code='CONNECTION_ERROR',
                details={'error': str(e)}
            )

        if not response.ok:
            logger.warning(f"Certification API error: HTTP {response.status_code}: {response.reason}", extra={
                'endpoint': endpoint,
                'status_code': response.status_code,
            })
            raise BackendError(
                message=f"HTTP {response.status_code}: {response.reason}",
                code='API_ERROR',
                status_code=response.status_code,
            )

        content_type = response.headers.get('Content-Type', 'application/octet-stream')
        return response.content, content_type
