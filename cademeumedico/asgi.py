"""
ASGI config for the cademeumedico project.

Serves plain HTTP; e.g. ``uvicorn cademeumedico.asgi:application``.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cademeumedico.settings")

application = get_asgi_application()
