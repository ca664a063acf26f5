"""ASGI config for the ShowRate project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "showrate_project.settings.production")

application = get_asgi_application()
