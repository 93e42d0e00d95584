"""
Tests for the health check endpoint.
"""

from unittest.mock import patch

import pytest
from django.db import OperationalError


@pytest.mark.django_db
class TestHealthCheck:
    def test_healthy(self, api_client):
        response = api_client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "channel_layer": "connected",
        }

    def test_missing_channel_layer_only_degrades(self, api_client):
        with patch("core.views.get_channel_layer", return_value=None):
            response = api_client.get("/health/")

        assert response.status_code == 200
        assert response.json()["channel_layer"] == "disconnected"

    def test_database_down_is_unhealthy(self, api_client):
        with patch("core.views.connection") as connection:
            connection.cursor.side_effect = OperationalError("gone")
            response = api_client.get("/health/")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
