"""
Smoke test a running API server through :class:`ApiClient`.

Logs in with the seeded admin account, lists patients and logs out
again.  Exits non-zero on the first failing call.
"""
import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from requests import RequestException

from records.services.api_client import ApiClient, ApiError
from records.services.token_store import MemoryTokenStore


class Command(BaseCommand):
    help = "Exercise login and patient listing against a running server."

    def add_arguments(self, parser):
        parser.add_argument('--base-url', default=settings.API_CLIENT_BASE_URL)
        parser.add_argument('--username', default=settings.SEED_ADMIN_USERNAME)
        parser.add_argument('--password', default=settings.SEED_ADMIN_PASSWORD)

    def handle(self, *args, **opts):
        client = ApiClient.from_settings(base_url=opts['base_url'], token_store=MemoryTokenStore())
        self.stdout.write(f"target: {client.base_url}")
        try:
            started = time.monotonic()
            data = client.login(opts['username'], opts['password'])
            self.stdout.write(self.style.SUCCESS(
                f"login ok as {data['user']['username']} ({data['user']['role']}) "
                f"in {time.monotonic() - started:.2f}s"
            ))

            started = time.monotonic()
            patients = client.list_patients()
            self.stdout.write(self.style.SUCCESS(
                f"patients ok: {len(patients)} record(s) in {time.monotonic() - started:.2f}s"
            ))
            for p in patients:
                self.stdout.write(f"  #{p['id']} {p['firstName']} {p['lastName']} {p['dob']} {p['gender']}")

            client.logout()
            self.stdout.write(self.style.SUCCESS("logout ok"))
        except ApiError as exc:
            raise CommandError(f"{exc.method} {exc.url} failed ({exc.status_code}): {exc.message}") from exc
        except RequestException as exc:
            raise CommandError(f"cannot reach {client.base_url}: {exc}") from exc
