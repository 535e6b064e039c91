"""
Client for the clinic JSON API.

``ApiClient.request`` is the Python counterpart of the front-end
``fetchAPI`` helper: it prefixes the endpoint with the API base URL,
sends a JSON content type, attaches ``Authorization: Bearer <token>``
when a token is stored and returns the decoded JSON body.  Responses
outside the 2xx range raise :class:`ApiError` carrying the status code
and whatever body the server returned; so does a 2xx response whose
body is not JSON.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from records.services.token_store import FileTokenStore, MemoryTokenStore

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, payload: Any = None, *, method: str = '', url: str = ''):
        super().__init__(f"{method} {url} -> {status_code}: {message}".strip())
        self.status_code = status_code
        self.message = message
        self.payload = payload
        self.method = method
        self.url = url


class ApiAuthError(ApiError):
    """401 or 403: missing, expired or insufficient credentials."""


class ApiServerError(ApiError):
    """5xx: the server failed to handle a valid request."""


def _error_class(status_code: int) -> type[ApiError]:
    if status_code in (401, 403):
        return ApiAuthError
    if status_code >= 500:
        return ApiServerError
    return ApiError


def _decode(response: requests.Response) -> Any:
    """Parse the JSON body; a non-JSON body raises ``ValueError``."""
    if not response.content:
        return None
    return response.json()


class ApiClient:
    def __init__(self, base_url: str, token_store=None, session: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip('/')
        self.token_store = token_store if token_store is not None else MemoryTokenStore()
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, **overrides) -> 'ApiClient':
        from django.conf import settings

        options = {
            'base_url': settings.API_CLIENT_BASE_URL,
            'token_store': FileTokenStore(settings.API_CLIENT_TOKEN_FILE),
            'timeout': settings.API_CLIENT_TIMEOUT,
        }
        options.update(overrides)
        return cls(**options)

    def _headers(self, extra: Optional[dict] = None) -> dict:
        headers = dict(extra or {})
        headers['Content-Type'] = 'application/json'
        token = self.token_store.get()
        if token:
            headers['Authorization'] = f'Bearer {token}'
        else:
            headers.pop('Authorization', None)
        return headers

    def request(self, endpoint: str, method: str = 'GET', **options) -> Any:
        """Send a request to ``{base_url}{endpoint}`` and return the JSON body.

        ``options`` are passed to ``requests.Session.request``; any
        ``headers`` given are merged underneath the content type and
        authorization headers, which always win.
        """
        url = f"{self.base_url}{endpoint}"
        headers = self._headers(options.pop('headers', None))
        options.setdefault('timeout', self.timeout)
        response = self.session.request(method.upper(), url, headers=headers, **options)
        ok = 200 <= response.status_code < 300
        try:
            body = _decode(response)
        except ValueError:
            if ok:
                raise ApiError(
                    response.status_code, 'Invalid JSON response', response.text,
                    method=method.upper(), url=url,
                )
            body = response.text
        if not ok:
            message = body.get('message') if isinstance(body, dict) else None
            logger.warning("API %s %s failed with %s", method.upper(), url, response.status_code)
            raise _error_class(response.status_code)(
                response.status_code,
                message or response.reason or 'API Error',
                body,
                method=method.upper(),
                url=url,
            )
        return body

    # -----------------------------------------------------------------
    # Auth
    # -----------------------------------------------------------------
    def login(self, username: str, password: str) -> dict:
        body = self.request('/login', 'POST', json={'username': username, 'password': password})
        data = body.get('data') or {}
        self.token_store.set(data.get('token'))
        return data

    def logout(self, refresh: Optional[str] = None) -> None:
        try:
            if self.token_store.get():
                self.request('/logout', 'POST', json={'refresh': refresh} if refresh else {})
        finally:
            self.token_store.clear()

    def register(self, **fields) -> dict:
        return self.request('/register', 'POST', json=fields)

    # -----------------------------------------------------------------
    # Patients
    # -----------------------------------------------------------------
    def list_patients(self) -> list:
        return (self.request('/patients') or {}).get('data') or []

    def get_patient(self, patient_id: int) -> dict:
        return self.request(f'/patients/{patient_id}')['data']

    def create_patient(self, **fields) -> dict:
        return self.request('/patients', 'POST', json=fields)['data']

    def update_patient(self, patient_id: int, **fields) -> dict:
        return self.request(f'/patients/{patient_id}', 'PATCH', json=fields)['data']

    def delete_patient(self, patient_id: int) -> None:
        self.request(f'/patients/{patient_id}', 'DELETE')
