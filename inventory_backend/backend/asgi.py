# backend/asgi.py
"""
ASGI entrypoint for the inventory ledger.

Falls back to backend.settings.dev when DJANGO_SETTINGS_MODULE is unset.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_asgi_application()
