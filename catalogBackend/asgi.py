"""
ASGI config for catalogBackend project.

It exposes the ASGI callable as a module-level variable named ``application``.
Each HTTP request runs as its own task, so store and file I/O of one request
never blocks the others.
"""

import os

from django.core.asgi import get_asgi_application


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "catalogBackend.settings")

application = get_asgi_application()
