"""
ASGI config for the clinic project.

Exposes the ASGI callable as ``application`` for servers such as uvicorn.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic.settings")

application = get_asgi_application()
