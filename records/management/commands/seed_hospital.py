from django.conf import settings
from django.core.management.base import BaseCommand

from records.services.seed import seed_database


class Command(BaseCommand):
    help = "Create the admin account and sample patients (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--admin-username', default=settings.SEED_ADMIN_USERNAME)
        parser.add_argument(
            '--admin-password',
            default=settings.SEED_ADMIN_PASSWORD,
            help="Password for a newly created admin; an existing admin keeps its password.",
        )

    def handle(self, *args, **opts):
        report = seed_database(admin_username=opts['admin_username'], admin_password=opts['admin_password'])
        if report.user_created:
            self.stdout.write(self.style.SUCCESS(f"created user: {opts['admin_username']}"))
        else:
            self.stdout.write(f"user exists: {opts['admin_username']}")
        if report.patients_created:
            self.stdout.write(self.style.SUCCESS(f"inserted {report.patients_created} sample patients"))
        else:
            self.stdout.write("patients table not empty, sample patients skipped")
        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: {report.total_users} user(s), {report.total_patients} patient(s)."
        ))
