# =============================================================================
# Project configuration package
# =============================================================================
# Settings, URL routing, the ASGI/WSGI entry points and the Celery app.
#
# The Celery app is imported here so that @shared_task functions (the chat
# fan-out tasks) bind to it whenever Django starts, in web and worker
# processes alike.
# =============================================================================

from config.celery import app as celery_app

__all__ = ("celery_app",)
