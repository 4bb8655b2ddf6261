"""
Tests for the HTTP API: authentication, role gating and room workflows.
"""

import io

from openpyxl import load_workbook

from frontdesk.config.settings import settings

API = settings.API_V1_STR


def _create_room(client, headers, number="101", room_type="single"):
    response = client.post(f"{API}/rooms", json={"number": number, "type": room_type}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_request_headers(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
        assert "X-Process-Time" in response.headers


class TestAuth:
    def test_sign_up_starts_pending(self, client, password):
        response = client.post(
            f"{API}/auth/sign-up",
            json={"full_name": "Nora Diaz", "email": "Nora@Hostel-Frontdesk.es", "password": password},
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "Pending"
        assert data["email"] == "nora@hostel-frontdesk.es"

    def test_duplicate_email(self, client, admin, password):
        response = client.post(
            f"{API}/auth/sign-up",
            json={"full_name": "Again", "email": "admin@hostel-frontdesk.es", "password": password},
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "DuplicateEmail"

    def test_sign_in(self, client, admin, password):
        response = client.post(
            f"{API}/auth/sign-in",
            data={"username": "admin@hostel-frontdesk.es", "password": password},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["role"] == "Admin"

        me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.json()["data"]["email"] == "admin@hostel-frontdesk.es"

    def test_wrong_password(self, client, admin):
        response = client.post(
            f"{API}/auth/sign-in",
            data={"username": "admin@hostel-frontdesk.es", "password": "not-the-password"},
        )
        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTHENTICATION_FAILED"

    def test_bad_token(self, client):
        response = client.get(f"{API}/rooms", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401


class TestAccessControl:
    def test_pending_user_blocked(self, client, pending, headers_for):
        response = client.get(f"{API}/rooms", headers=headers_for(pending))
        assert response.status_code == 403
        assert response.json()["error_code"] == "ACCOUNT_PENDING"

    def test_worker_reads_rooms(self, client, admin_headers, worker_headers):
        _create_room(client, admin_headers)
        response = client.get(f"{API}/rooms", headers=worker_headers)
        assert response.status_code == 200
        assert [r["number"] for r in response.json()["data"]] == ["101"]

    def test_worker_cannot_check_in(self, client, admin_headers, worker_headers):
        room = _create_room(client, admin_headers)
        response = client.post(
            f"{API}/rooms/{room['id']}/check-in",
            json={"guest1": {"name": "Ana"}},
            headers=worker_headers,
        )
        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    def test_worker_marks_clean(self, client, admin_headers, worker_headers):
        room = _create_room(client, admin_headers)
        client.patch(f"{API}/rooms/{room['id']}/status", json={"status": "Dirty"}, headers=admin_headers)

        response = client.post(f"{API}/rooms/{room['id']}/clean", headers=worker_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "Free"

    def test_room_view_follows_role(self, client, admin_headers, worker_headers):
        room = _create_room(client, admin_headers)
        admin_view = client.get(f"{API}/rooms/{room['id']}/view", headers=admin_headers)
        worker_view = client.get(f"{API}/rooms/{room['id']}/view", headers=worker_headers)
        assert admin_view.json()["data"]["view"] == "admin"
        assert worker_view.json()["data"]["view"] == "worker"

    def test_admin_promotes_user(self, client, admin_headers, pending, headers_for):
        response = client.patch(
            f"{API}/users/{pending.id}/role",
            json={"role": "Worker"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "Worker"

        assert client.get(f"{API}/rooms", headers=headers_for(pending)).status_code == 200


class TestRoomWorkflow:
    def test_double_room_stay(self, client, admin_headers):
        room = _create_room(client, admin_headers, "201", "double")
        base = f"{API}/rooms/{room['id']}"

        response = client.post(
            f"{base}/check-in",
            json={"guest1": {"name": "Ana", "phone": "+34600111222"}, "company": "Acme"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "Occupied"

        response = client.post(f"{base}/second-guest", json={"name": "Bob"}, headers=admin_headers)
        assert [g["name"] for g in response.json()["data"]["guests"]] == ["Ana", "Bob"]

        response = client.post(f"{base}/checkout/guest1", headers=admin_headers)
        assert response.json()["data"]["status"] == "Occupied"

        response = client.post(f"{base}/checkout/guest2", headers=admin_headers)
        assert response.json()["data"]["status"] == "Dirty"

        history = client.get(f"{API}/history", params={"room_id": room["id"]}, headers=admin_headers)
        entries = history.json()["data"]
        assert len(entries) == 1
        assert entries[0]["guest2_name"] == "Bob"
        assert entries[0]["is_open"] is False

    def test_duplicate_room_number(self, client, admin_headers):
        _create_room(client, admin_headers)
        response = client.post(f"{API}/rooms", json={"number": "101", "type": "single"}, headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["error_code"] == "DuplicateRoomNumber"

    def test_invalid_phone(self, client, admin_headers):
        room = _create_room(client, admin_headers)
        response = client.post(
            f"{API}/rooms/{room['id']}/check-in",
            json={"guest1": {"name": "Ana", "phone": "abc"}},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "InvalidPhoneFormat"

    def test_invalid_status(self, client, admin_headers):
        room = _create_room(client, admin_headers)
        response = client.patch(
            f"{API}/rooms/{room['id']}/status",
            json={"status": "Broken"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "InvalidStatus"

    def test_unknown_room(self, client, admin_headers):
        response = client.get(f"{API}/rooms/missing", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error_code"] == "RoomNotFound"

    def test_stats_and_filter(self, client, admin_headers):
        room = _create_room(client, admin_headers, "101")
        _create_room(client, admin_headers, "102")
        client.post(f"{API}/rooms/{room['id']}/check-in", json={"guest1": {"name": "Ana"}}, headers=admin_headers)

        stats = client.get(f"{API}/rooms/stats", headers=admin_headers).json()["data"]
        assert stats == {"total": 2, "free": 1, "occupied": 1, "dirty": 0, "occupancy_rate": 50}

        occupied = client.get(f"{API}/rooms", params={"status": "Occupied"}, headers=admin_headers)
        assert [r["number"] for r in occupied.json()["data"]] == ["101"]

    def test_delete_room(self, client, admin_headers):
        room = _create_room(client, admin_headers)
        response = client.delete(f"{API}/rooms/{room['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True


class TestHistoryAndExports:
    def test_history_is_admin_only(self, client, worker_headers):
        assert client.get(f"{API}/history", headers=worker_headers).status_code == 403

    def test_bad_date_range(self, client, admin_headers):
        response = client.get(
            f"{API}/history",
            params={"date_from": "2025-03-10", "date_to": "2025-03-01"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_monthly_export_download(self, client, admin_headers):
        room = _create_room(client, admin_headers)
        client.post(
            f"{API}/rooms/{room['id']}/check-in",
            json={"guest1": {"name": "Ana", "checkin_date": "2025-03-10"}},
            headers=admin_headers,
        )

        response = client.get(f"{API}/exports/monthly", params={"year": 2025, "month": 3}, headers=admin_headers)

        assert response.status_code == 200
        assert 'filename="history_march_2025.xlsx"' in response.headers["content-disposition"]
        workbook = load_workbook(io.BytesIO(response.content))
        assert workbook.sheetnames == ["Summary", "Detailed"]

    def test_export_without_data(self, client, admin_headers):
        response = client.get(f"{API}/exports/yearly", params={"year": 2024}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error_code"] == "NoDataToExport"
