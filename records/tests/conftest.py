import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from records.models import User


@pytest.fixture(autouse=True)
def _reset_throttles():
    # throttle counters live in the locmem cache and outlive a single test
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def _make(username, role='patient', password='P@ssw0rd1', **extra):
        return User.objects.create_user(username=username, password=password, role=role, **extra)
    return _make


@pytest.fixture
def bearer(api_client):
    """Log ``username`` in and return a client sending its access token."""
    def _login(username, password='P@ssw0rd1'):
        r = api_client.post('/api/login', {'username': username, 'password': password}, format='json')
        assert r.status_code == 200, r.data
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['data']['token']}")
        return api_client
    return _login
