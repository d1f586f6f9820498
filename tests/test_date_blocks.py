"""
Tests für Date-Block Endpoints.

Testet:
- GET /date-blocks/
- POST /date-blocks/ (nur Admin)
- DELETE /date-blocks/{id} (nur Admin)
- Zusammenspiel mit Reservierungen
"""
from uuid import uuid4

from tests.conftest import auth_header, reservation_payload


def block_payload(**overrides) -> dict:
    payload = {
        "property_id": "caraguatatuba",
        "start_date": "2025-07-01",
        "end_date": "2025-07-05",
        "reason": "Wartung Klimaanlage",
    }
    payload.update(overrides)
    return payload


class TestCreateDateBlock:
    """Tests für POST /date-blocks/"""

    def test_create_success(self, client, admin_token):
        response = client.post("/date-blocks/", json=block_payload(), headers=auth_header(admin_token))

        assert response.status_code == 201
        data = response.json()
        assert data["reason"] == "Wartung Klimaanlage"
        assert data["start_date"] == "2025-07-01"

    def test_create_without_auth(self, client):
        """Ohne Login → 401"""
        response = client.post("/date-blocks/", json=block_payload())
        assert response.status_code == 401

    def test_create_over_reservation_conflict(self, client, admin_token, reservation):
        response = client.post(
            "/date-blocks/",
            json=block_payload(start_date="2025-07-15", end_date="2025-07-16"),
            headers=auth_header(admin_token)
        )

        assert response.status_code == 409
        assert response.json()["detail"]["conflicts"][0]["kind"] == "reservation"

    def test_create_without_reason(self, client, admin_token):
        response = client.post("/date-blocks/", json=block_payload(reason=""), headers=auth_header(admin_token))
        assert response.status_code == 422

    def test_reason_too_long(self, client, admin_token):
        response = client.post(
            "/date-blocks/",
            json=block_payload(reason="x" * 256),
            headers=auth_header(admin_token)
        )
        assert response.status_code == 422

    def test_create_too_long_block(self, client, admin_token):
        response = client.post(
            "/date-blocks/",
            json=block_payload(start_date="2025-01-01", end_date="2026-12-31"),
            headers=auth_header(admin_token)
        )

        assert response.status_code == 422
        assert client.get("/date-blocks/").json() == []

    def test_block_prevents_reservation(self, client, admin_token):
        client.post("/date-blocks/", json=block_payload(), headers=auth_header(admin_token))

        response = client.post("/reservations/", json=reservation_payload(
            start_date="2025-07-04",
            end_date="2025-07-08"
        ))

        assert response.status_code == 409
        assert response.json()["detail"]["conflicts"][0]["kind"] == "block"

    def test_block_does_not_affect_other_property(self, client, admin_token):
        client.post("/date-blocks/", json=block_payload(), headers=auth_header(admin_token))

        response = client.post("/reservations/", json=reservation_payload(
            property_id="praia_grande",
            start_date="2025-07-01",
            end_date="2025-07-05"
        ))

        assert response.status_code == 201


class TestListAndDeleteDateBlocks:
    """Tests für GET und DELETE /date-blocks/"""

    def test_list_sorted_by_start(self, client, admin_token):
        client.post("/date-blocks/", json=block_payload(start_date="2025-09-01", end_date="2025-09-02"), headers=auth_header(admin_token))
        client.post("/date-blocks/", json=block_payload(), headers=auth_header(admin_token))

        response = client.get("/date-blocks/")

        assert response.status_code == 200
        assert [b["start_date"] for b in response.json()] == ["2025-07-01", "2025-09-01"]

    def test_delete_success(self, client, admin_token):
        created = client.post("/date-blocks/", json=block_payload(), headers=auth_header(admin_token)).json()

        response = client.delete(f"/date-blocks/{created['id']}", headers=auth_header(admin_token))

        assert response.status_code == 200
        assert client.get("/date-blocks/").json() == []

        # Zeitraum ist wieder buchbar
        booking = client.post("/reservations/", json=reservation_payload(
            start_date="2025-07-01",
            end_date="2025-07-05"
        ))
        assert booking.status_code == 201

    def test_delete_not_found(self, client, admin_token):
        response = client.delete(f"/date-blocks/{uuid4()}", headers=auth_header(admin_token))
        assert response.status_code == 404

    def test_delete_without_auth(self, client):
        response = client.delete(f"/date-blocks/{uuid4()}")
        assert response.status_code == 401

    def test_activity_log_for_admin(self, client, admin_token):
        client.post("/date-blocks/", json=block_payload(), headers=auth_header(admin_token))

        response = client.get("/activities/?entity_type=date_block", headers=auth_header(admin_token))

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["action_type"] == "BLOCK CREATED"
        assert data[0]["user"]["name"] == "Test Admin"

    def test_activity_log_requires_auth(self, client):
        response = client.get("/activities/")
        assert response.status_code == 401
