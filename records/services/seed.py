"""
Database seeding.

Provisions the ``admin`` credential and the two sample patients used by
the front-end during development.  Running it again is harmless: the
admin account is upserted and patients are only inserted into an empty
table.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.db import transaction

from records.models import Patient

User = get_user_model()
logger = logging.getLogger(__name__)

SAMPLE_PATIENTS = [
    {'first_name': 'John', 'last_name': 'Doe', 'dob': date(1990, 1, 1), 'gender': 'Male'},
    {'first_name': 'Jane', 'last_name': 'Doe', 'dob': date(1995, 2, 1), 'gender': 'Female'},
]


@dataclass
class SeedReport:
    user_created: bool
    patients_created: int
    total_users: int
    total_patients: int


@transaction.atomic
def seed_database(*, admin_username: str = 'admin', admin_password: str) -> SeedReport:
    # an existing admin keeps its password
    _, user_created = User.objects.get_or_create(
        username=admin_username,
        defaults={
            'password': make_password(admin_password),
            'role': User.ROLE_ADMIN,
            'is_staff': True,
            'is_active': True,
        },
    )
    if user_created:
        logger.info("seeded user %s", admin_username)

    patients_created = 0
    if not Patient.objects.exists():
        Patient.objects.bulk_create(Patient(**row) for row in SAMPLE_PATIENTS)
        patients_created = len(SAMPLE_PATIENTS)
        logger.info("seeded %d sample patients", patients_created)

    return SeedReport(
        user_created=user_created,
        patients_created=patients_created,
        total_users=User.objects.count(),
        total_patients=Patient.objects.count(),
    )
