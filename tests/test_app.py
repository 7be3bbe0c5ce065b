"""
Tests for application setup: health check, CORS and configuration checks.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from app import _cors_origins, create_app
from exceptions import ConfigurationError
from sqlalchemy.exc import OperationalError


class TestHealth:
    def test_ok(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert json.loads(response.data) == {"status": "ok"}

    def test_database_unreachable(self, client):
        with patch("routes.health.get_db") as mock_get_db:
            mock_db = MagicMock()
            mock_db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
            mock_get_db.return_value = mock_db

            response = client.get("/api/health")

            assert response.status_code == 500
            assert json.loads(response.data)["error"] == "Database error: connection refused"


class TestCors:
    def test_api_allows_cross_origin(self, client):
        response = client.get("/api/health", headers={"Origin": "http://localhost:5173"})

        assert response.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:5173")

    def test_origin_list_parsing(self):
        assert _cors_origins("*") == "*"
        assert _cors_origins("http://a.test, http://b.test,") == ["http://a.test", "http://b.test"]


class TestConfigValidation:
    def test_missing_database_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_app({"DATABASE_URL": ""})

        assert exc_info.value.config_key == "DATABASE_URL"

    @pytest.mark.parametrize("weeks", [0, 53])
    def test_default_weeks_outside_window(self, weeks):
        with pytest.raises(ConfigurationError) as exc_info:
            create_app({"DEFAULT_WEEKS": weeks})

        assert exc_info.value.config_key == "DEFAULT_WEEKS"


class TestRouting:
    def test_unknown_route(self, client):
        assert client.get("/api/nothing-here").status_code == 404

    def test_routes_mounted_under_api(self, client):
        assert client.get("/users").status_code == 404
        assert client.get("/api/users").status_code == 200
