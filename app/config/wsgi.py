"""
WSGI config for the Django application.

Serves the HTTP API only. WebSockets need the ASGI application in
config/asgi.py, which is what production runs under Uvicorn.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
