from datetime import date
from io import StringIO

import pytest
from django.core.management import call_command

from records.models import Patient, User
from records.services.seed import seed_database

pytestmark = pytest.mark.django_db


def test_seed_creates_one_user_and_two_patients():
    report = seed_database(admin_password='password123')
    assert report.user_created is True
    assert report.patients_created == 2

    assert User.objects.count() == 1
    admin = User.objects.get()
    assert admin.username == 'admin'
    assert admin.role == 'admin'
    assert admin.password != 'password123'
    assert admin.check_password('password123')

    rows = list(Patient.objects.values_list('first_name', 'last_name', 'dob', 'gender'))
    assert rows == [
        ('John', 'Doe', date(1990, 1, 1), 'Male'),
        ('Jane', 'Doe', date(1995, 2, 1), 'Female'),
    ]


def test_seed_is_idempotent():
    seed_database(admin_password='password123')
    report = seed_database(admin_password='changed')
    assert report.user_created is False
    assert report.patients_created == 0
    assert report.total_users == 1
    assert report.total_patients == 2
    # the existing admin keeps its original password
    assert User.objects.get(username='admin').check_password('password123')


def test_seed_skips_patients_when_table_has_rows():
    Patient.objects.create(first_name='Ann', last_name='Lee', dob=date(2001, 7, 15), gender='Female')
    report = seed_database(admin_password='password123')
    assert report.patients_created == 0
    assert Patient.objects.count() == 1


def test_seed_command(api_client):
    out = StringIO()
    call_command('seed_hospital', '--admin-password', 's3cret!', stdout=out)
    assert 'created user: admin' in out.getvalue()
    assert 'inserted 2 sample patients' in out.getvalue()

    r = api_client.post('/api/login', {'username': 'admin', 'password': 's3cret!'}, format='json')
    assert r.status_code == 200
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['data']['token']}")
    names = [p['firstName'] for p in api_client.get('/api/patients').data['data']]
    assert names == ['John', 'Jane']

    out = StringIO()
    call_command('seed_hospital', stdout=out)
    assert 'user exists: admin' in out.getvalue()
    assert 'Seed complete: 1 user(s), 2 patient(s).' in out.getvalue()
