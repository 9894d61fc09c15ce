# backend/tests/unit/test_routes.py
"""
HTTP-level tests for the v1 API.

Requests go through the real app with the database session and storage
service overridden (see conftest).
"""

from app.services.counselor_service import CounselorService

PROBLEM_KEYS = {"type", "title", "status", "detail", "instance"}


class TestAuthGuards:
    def test_admin_route_without_token_is_401(self, client):
        response = client.get("/api/v1/leads/")

        assert response.status_code == 401
        body = response.json()
        assert PROBLEM_KEYS <= set(body)
        assert body["instance"] == "/api/v1/leads/"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_admin_route_with_user_token_is_403(self, client, user_headers):
        response = client.get("/api/v1/leads/", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["title"] == "Forbidden"

    def test_garbage_token_is_401(self, client):
        response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_profile_with_valid_token(self, client, user_headers, regular_user):
        response = client.get("/api/v1/users/me", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["email"] == regular_user["email"]


class TestLeadRoutes:
    def test_public_enquiry_then_admin_listing(self, client, admin_headers):
        created = client.post(
            "/api/v1/leads/",
            json={"fullName": "Lina Lead", "email": "lina@example.com", "areaOfInterest": "UX"},
        )
        assert created.status_code == 201

        listing = client.get("/api/v1/leads/", headers=admin_headers)

        assert listing.status_code == 200
        body = listing.json()
        assert body["total"] == 1
        assert body["items"][0]["email"] == "lina@example.com"

    def test_duplicate_enquiry_is_409_problem(self, client):
        payload = {"fullName": "Lina Lead", "email": "lina@example.com"}
        client.post("/api/v1/leads/", json=payload)

        response = client.post("/api/v1/leads/", json=payload)

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "DUPLICATE_RESOURCE"
        assert body["title"] == "Conflict"

    def test_missing_field_is_422(self, client):
        response = client.post("/api/v1/leads/", json={"email": "x@example.com"})

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_sort_field_outside_whitelist_is_400(self, client, admin_headers):
        response = client.get("/api/v1/leads/?sortBy=phone", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SORT_FIELD"

    def test_limit_out_of_range_is_422(self, client, admin_headers):
        response = client.get("/api/v1/leads/?limit=0", headers=admin_headers)

        assert response.status_code == 422


class TestBookingRoutes:
    def _counselor(self, unit_db):
        return CounselorService(unit_db).create_counselor(
            {"fullName": "Dr. Cora", "email": "cora@example.com"}
        )

    def test_booking_lifecycle_over_http(self, client, unit_db, admin_headers):
        counselor = self._counselor(unit_db)
        payload = {
            "counselorId": counselor["id"],
            "guestName": "Gita Guest",
            "guestEmail": "gita@example.com",
            "bookingDate": "2099-06-15",
            "bookingTime": "10:00",
        }

        created = client.post("/api/v1/bookings/", json=payload)
        assert created.status_code == 201
        booking = created.json()
        assert booking["status"] == "pending"
        assert booking["duration"] == 60

        clash = client.post("/api/v1/bookings/", json=payload)
        assert clash.status_code == 409
        assert clash.json()["code"] == "BOOKING_CONFLICT"

        availability = client.get(
            "/api/v1/bookings/availability",
            params={"counselorId": counselor["id"], "bookingDate": "2099-06-15", "bookingTime": "10:00"},
        )
        assert availability.json() == {"available": False}

        confirmed = client.post(
            f"/api/v1/bookings/{booking['id']}/confirm",
            json={"meetingLink": "https://meet.example.com/x"},
            headers=admin_headers,
        )
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"

        again = client.post(
            f"/api/v1/bookings/{booking['id']}/confirm",
            json={"meetingLink": "https://meet.example.com/x"},
            headers=admin_headers,
        )
        assert again.status_code == 409
        assert again.json()["code"] == "INVALID_STATE_TRANSITION"

    def test_unknown_booking_is_404(self, client):
        response = client.get("/api/v1/bookings/01UNKNOWN")

        assert response.status_code == 404
        assert response.json()["detail"] == "Booking not found"


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_prometheus_scrape(self, client):
        client.get("/api/v1/health")

        response = client.get("/metrics/prometheus")

        assert response.status_code == 200
        assert "counseling_http_requests_total" in response.text
        assert response.headers["Cache-Control"].startswith("no-cache")

    def test_summary_requires_admin(self, client, admin_headers, user_headers):
        assert client.get("/api/v1/summary", headers=user_headers).status_code == 403

        response = client.get("/api/v1/summary", headers=admin_headers)

        assert response.status_code == 200
        assert "timestamp" in response.json()
