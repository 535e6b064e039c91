import json

import pytest
import requests

from records.services.api_client import ApiAuthError, ApiClient, ApiError, ApiServerError
from records.services.seed import seed_database
from records.services.token_store import FileTokenStore, MemoryTokenStore


def make_response(status_code=200, body=None, reason='OK'):
    r = requests.Response()
    r.status_code = status_code
    r.reason = reason
    r._content = b'' if body is None else json.dumps(body).encode()
    r.headers['Content-Type'] = 'application/json'
    return r


class FakeSession:
    """Records outgoing requests and replays canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        return self.responses.pop(0)


def test_authorization_header_only_when_token_stored():
    session = FakeSession(make_response(body={'ok': 1}), make_response(body={'ok': 2}))
    store = MemoryTokenStore()
    client = ApiClient('http://api.test/api', store, session=session)

    client.request('/patients')
    store.set('abc.def.ghi')
    client.request('/patients')

    first, second = session.calls
    assert first['url'] == 'http://api.test/api/patients'
    assert first['headers'] == {'Content-Type': 'application/json'}
    assert second['headers'] == {'Content-Type': 'application/json', 'Authorization': 'Bearer abc.def.ghi'}


def test_caller_options_are_merged():
    session = FakeSession(make_response(body={}))
    client = ApiClient('http://api.test/api/', MemoryTokenStore('tok'), session=session, timeout=3)

    client.request('/patients', 'post', json={'a': 1},
                   headers={'X-Trace': '1', 'Content-Type': 'text/plain', 'Authorization': 'Basic x'})

    call = session.calls[0]
    assert call['method'] == 'POST'
    assert call['url'] == 'http://api.test/api/patients'
    assert call['json'] == {'a': 1}
    assert call['timeout'] == 3
    assert call['headers'] == {
        'X-Trace': '1',
        'Content-Type': 'application/json',
        'Authorization': 'Bearer tok',
    }


def test_stale_caller_authorization_dropped_without_token():
    session = FakeSession(make_response(body={}))
    ApiClient('http://api.test', MemoryTokenStore(), session=session).request('/x', headers={'Authorization': 'Bearer old'})
    assert 'Authorization' not in session.calls[0]['headers']


def test_returns_parsed_json_for_2xx():
    body = {'success': True, 'data': [{'id': 1}]}
    client = ApiClient('http://api.test', session=FakeSession(make_response(201, body, 'Created')))
    assert client.request('/patients', 'POST') == body


def test_empty_body_returns_none():
    client = ApiClient('http://api.test', session=FakeSession(make_response(204, None, 'No Content')))
    assert client.request('/x', 'DELETE') is None


@pytest.mark.parametrize('status_code, error_cls', [
    (400, ApiError),
    (401, ApiAuthError),
    (403, ApiAuthError),
    (404, ApiError),
    (409, ApiError),
    (500, ApiServerError),
    (503, ApiServerError),
])
def test_non_2xx_raises_with_status_and_body(status_code, error_cls):
    body = {'success': False, 'message': 'nope'}
    client = ApiClient('http://api.test', session=FakeSession(make_response(status_code, body, 'Err')))
    with pytest.raises(error_cls) as info:
        client.request('/patients')
    err = info.value
    assert type(err) is error_cls
    assert err.status_code == status_code
    assert err.message == 'nope'
    assert err.payload == body
    assert err.url == 'http://api.test/patients'


def test_error_without_envelope_uses_reason():
    r = make_response(502, None, 'Bad Gateway')
    r._content = b'<html>bad gateway</html>'
    client = ApiClient('http://api.test', session=FakeSession(r))
    with pytest.raises(ApiServerError) as info:
        client.request('/patients')
    assert info.value.message == 'Bad Gateway'
    assert info.value.payload == '<html>bad gateway</html>'


def test_non_json_success_body_raises():
    def portal():
        r = make_response(200)
        r._content = b'<html>captive portal</html>'
        r.headers['Content-Type'] = 'text/html'
        return r

    client = ApiClient('http://api.test', session=FakeSession(portal(), portal()))
    with pytest.raises(ApiError) as info:
        client.request('/patients')
    assert info.value.status_code == 200
    assert info.value.message == 'Invalid JSON response'
    assert info.value.payload == '<html>captive portal</html>'

    with pytest.raises(ApiError) as info:
        client.list_patients()
    assert info.value.status_code == 200
    assert not isinstance(info.value, (ApiAuthError, ApiServerError))


def test_login_stores_token_and_logout_clears(tmp_path):
    store = FileTokenStore(tmp_path / 'token.json')
    session = FakeSession(
        make_response(body={'success': True, 'message': 'Login successful', 'data': {'token': 'jwt-1', 'user': {}}}),
        make_response(body={'success': True, 'message': 'Logged out', 'data': {'blacklisted': 1}}),
    )
    client = ApiClient('http://api.test/api', store, session=session)

    client.login('admin', 'password123')
    assert store.get() == 'jwt-1'
    assert FileTokenStore(tmp_path / 'token.json').get() == 'jwt-1'

    client.logout()
    assert store.get() is None
    assert session.calls[1]['headers']['Authorization'] == 'Bearer jwt-1'


def test_logout_clears_token_even_when_server_rejects(tmp_path):
    store = FileTokenStore(tmp_path / 'token.json')
    store.set('expired')
    client = ApiClient('http://api.test/api', store, session=FakeSession(make_response(401, {'message': 'expired'})))
    with pytest.raises(ApiAuthError):
        client.logout()
    assert store.get() is None


def test_file_token_store_tolerates_garbage(tmp_path):
    path = tmp_path / 'token.json'
    store = FileTokenStore(path)
    assert store.get() is None
    path.write_text('not json')
    assert store.get() is None
    store.set('t')
    assert json.loads(path.read_text()) == {'token': 't'}
    store.clear()
    store.clear()
    assert not path.exists()


def test_from_settings(settings, tmp_path):
    settings.API_CLIENT_BASE_URL = 'http://example.test/api/'
    settings.API_CLIENT_TIMEOUT = 7
    settings.API_CLIENT_TOKEN_FILE = str(tmp_path / 'tok.json')
    client = ApiClient.from_settings()
    assert client.base_url == 'http://example.test/api'
    assert client.timeout == 7
    assert isinstance(client.token_store, FileTokenStore)
    assert client.token_store.path == tmp_path / 'tok.json'


@pytest.mark.django_db(transaction=True)
def test_end_to_end_against_live_server(live_server):
    seed_database(admin_password='password123')
    client = ApiClient(f'{live_server.url}/api', MemoryTokenStore())

    with pytest.raises(ApiAuthError) as info:
        client.list_patients()
    assert info.value.status_code == 401

    data = client.login('admin', 'password123')
    assert data['user']['role'] == 'admin'

    patients = client.list_patients()
    assert [(p['firstName'], p['dob'], p['gender']) for p in patients] == [
        ('John', '1990-01-01', 'Male'),
        ('Jane', '1995-02-01', 'Female'),
    ]

    created = client.create_patient(firstName='Ann', lastName='Lee', dob='2001-07-15', gender='Female')
    assert client.get_patient(created['id'])['lastName'] == 'Lee'
    assert client.update_patient(created['id'], lastName='Park')['lastName'] == 'Park'
    client.delete_patient(created['id'])
    with pytest.raises(ApiError) as info:
        client.get_patient(created['id'])
    assert info.value.status_code == 404

    client.logout()
    assert client.token_store.get() is None


@pytest.mark.django_db(transaction=True)
def test_login_with_stale_stored_token(live_server):
    seed_database(admin_password='password123')
    store = MemoryTokenStore('stale.token.value')
    client = ApiClient(f'{live_server.url}/api', store)

    data = client.login('admin', 'password123')
    assert data['token']
    assert store.get() == data['token']
    assert len(client.list_patients()) == 2
