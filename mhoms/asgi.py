"""
ASGI config for the MHOMS services project.

Plain HTTP only; the service has no websocket routes.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "mhoms.settings")

application = get_asgi_application()
