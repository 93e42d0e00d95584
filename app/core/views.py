"""
Core views providing infrastructure endpoints.
"""

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import connection
from django.http import JsonResponse


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - channel_layer: "connected" or "disconnected"

    HTTP Status Codes:
        200: Database reachable (channel layer failures only degrade)
        503: Database unreachable
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "channel_layer": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except Exception:
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    # Realtime delivery lags without the channel layer, but the message
    # store stays correct, so this never fails the check.
    try:
        layer = get_channel_layer()
        if layer is None:
            health_status["channel_layer"] = "disconnected"
        else:
            async_to_sync(layer.group_send)("health", {"type": "health.ping"})
            health_status["channel_layer"] = "connected"
    except Exception:
        health_status["channel_layer"] = "disconnected"

    status_code = 200 if is_healthy else 503

    return JsonResponse(health_status, status=status_code)
