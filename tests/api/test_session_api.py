"""Tests for the login session endpoints."""


class TestSessionApi:
    """Tests for /api/session."""

    def test_login_returns_token(self, api_client):
        response = api_client.post(
            "/api/session",
            json={"email": "anna.schmidt@consulting.eu", "password": "secret123"}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["token"]
        assert body["name"] == "Dr. Anna Schmidt"

    def test_short_password(self, api_client):
        response = api_client.post("/api/session", json={"email": "max@consulting.eu", "password": "123"})

        assert response.status_code == 400
        assert response.json()["error"] == "Password must be at least 6 characters"

    def test_current_session(self, api_client, auth_headers):
        response = api_client.get("/api/session", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "anna.schmidt@consulting.eu"

    def test_current_session_without_token(self, api_client):
        response = api_client.get("/api/session")

        assert response.status_code == 401

    def test_logout_ends_session(self, api_client, auth_headers):
        assert api_client.delete("/api/session", headers=auth_headers).json() == {"logged_out": True}
        assert api_client.get("/api/session", headers=auth_headers).status_code == 401
        assert api_client.delete("/api/session", headers=auth_headers).json() == {"logged_out": False}

    def test_health(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
