"""
Tests for preference routes.
"""

import json
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError


def _post_preferences(client, payload):
    return client.post("/api/preferences", data=json.dumps(payload), content_type="application/json")


class TestUpsertPreferences:
    """Tests for POST /api/preferences."""

    def test_create(self, client, user, vehicle):
        response = _post_preferences(client, {
            "userId": user.id,
            "selectedVehicleId": vehicle.id,
            "electricityPrice": 0.30,
            "alertThreshold": 15,
        })

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data["user_id"] == user.id
        assert data["selected_vehicle_id"] == vehicle.id
        assert data["electricity_price"] == 0.30
        assert data["alert_threshold"] == 15.0

    def test_partial_update_preserves_stored_values(self, client, user, vehicle):
        _post_preferences(client, {
            "userId": user.id,
            "selectedVehicleId": vehicle.id,
            "electricityPrice": 0.30,
            "alertThreshold": 15,
        })

        response = _post_preferences(client, {"userId": user.id})

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data["electricity_price"] == 0.30
        assert data["alert_threshold"] == 15.0
        assert data["selected_vehicle_id"] == vehicle.id

    def test_update_overwrites_given_fields(self, client, user):
        _post_preferences(client, {"userId": user.id, "electricityPrice": 0.30, "alertThreshold": 15})

        response = _post_preferences(client, {"userId": user.id, "electricityPrice": 0.22})

        data = json.loads(response.data)
        assert data["electricity_price"] == 0.22
        assert data["alert_threshold"] == 15.0

    def test_one_row_per_user(self, client, db_session, user):
        from models import UserPreference

        _post_preferences(client, {"userId": user.id, "electricityPrice": 0.30})
        _post_preferences(client, {"userId": user.id, "electricityPrice": 0.31})

        assert db_session.query(UserPreference).filter(UserPreference.user_id == user.id).count() == 1

    def test_users_do_not_overwrite_each_other(self, client, db_session, user):
        from factories import UserFactory

        other = UserFactory.create(db_session)
        _post_preferences(client, {"userId": user.id, "electricityPrice": 0.30})
        _post_preferences(client, {"userId": other.id, "electricityPrice": 0.40})

        response = client.get(f"/api/preferences/user?userId={user.id}")

        assert json.loads(response.data)["electricity_price"] == 0.30

    def test_missing_user_id_is_client_error(self, client):
        response = _post_preferences(client, {"electricityPrice": 0.30})

        assert response.status_code == 400
        assert json.loads(response.data)["field"] == "userId"

    def test_database_failure(self, client):
        with patch("routes.preferences.get_db") as mock_get_db:
            mock_db = MagicMock()
            mock_db.commit.side_effect = OperationalError("mock", "params", "orig")
            mock_get_db.return_value = mock_db

            response = _post_preferences(client, {"userId": 1, "electricityPrice": 0.30})

            assert response.status_code == 500
            mock_db.rollback.assert_called_once()


class TestGetPreferences:
    """Tests for GET /api/preferences and /api/preferences/user."""

    def test_empty_when_nothing_stored(self, client):
        response = client.get("/api/preferences")

        assert response.status_code == 200
        assert json.loads(response.data) == {}

    def test_joined_with_user_and_vehicle(self, client, user, vehicle):
        _post_preferences(client, {"userId": user.id, "selectedVehicleId": vehicle.id, "electricityPrice": 0.30})

        response = client.get("/api/preferences")

        data = json.loads(response.data)
        assert data["user_id"] == user.id
        assert data["user_name"] == user.name
        assert data["vehicle_id"] == vehicle.id
        assert data["vehicle_model"] == vehicle.model
        assert data["vehicle_color"] == vehicle.color
        assert data["electricity_price"] == 0.30

    def test_without_selected_vehicle(self, client, user):
        _post_preferences(client, {"userId": user.id})

        data = json.loads(client.get(f"/api/preferences/user?userId={user.id}").data)

        assert data["user_id"] == user.id
        assert data["vehicle_id"] is None

    def test_latest_preference_returned(self, client, db_session, user):
        from factories import UserFactory

        other = UserFactory.create(db_session)
        _post_preferences(client, {"userId": user.id})
        _post_preferences(client, {"userId": other.id})

        data = json.loads(client.get("/api/preferences").data)

        assert data["user_id"] == other.id

    def test_user_without_preferences(self, client, user):
        response = client.get(f"/api/preferences/user?userId={user.id}")

        assert response.status_code == 200
        assert json.loads(response.data) == {}

    def test_user_lookup_requires_user_id(self, client):
        response = client.get("/api/preferences/user")

        assert response.status_code == 400
