"""
Integration tests for the service endpoints and the middleware stack
"""

from unittest import mock

import pytest
from django.test import Client, TestCase, override_settings

from users.tests.fakes import FakeRandomUserClient


@pytest.fixture
def client():
    return Client()


class TestServiceEndpoints(TestCase):
    def test_index(self):
        response = self.client.get("/")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["endpoints"]["health"], "GET /health")
        self.assertIn("comments", data["endpoints"])

    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(), {"success": True, "status": "ok", "message": "Server is running"}
        )

    def test_query_endpoint_is_gone(self):
        response = self.client.post("/query", data={"sql": "SELECT 1"}, content_type="application/json")

        self.assertEqual(response.status_code, 410)
        self.assertEqual(
            response.json()["error"],
            "This endpoint has been deprecated for security reasons. "
            "Please use /user endpoint instead.",
        )

    def test_unknown_route(self):
        response = self.client.get("/does/not/exist")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"success": False, "error": "Route not found"})

    def test_head_served_by_get(self):
        response = self.client.head("/health")

        self.assertEqual(response.status_code, 200)


@pytest.mark.django_db
class TestMiddlewareStack:
    def test_security_headers(self, client):
        response = client.get("/health")

        assert response["X-Content-Type-Options"] == "nosniff"
        assert response["X-Frame-Options"] == "DENY"
        assert "default-src 'self'" in response["Content-Security-Policy"]
        assert "Server" not in response

    def test_rate_limit_headers(self, client):
        response = client.get("/health")

        assert response["RateLimit-Limit"] == "100"
        assert response["RateLimit-Remaining"] == "99"

    def test_unknown_routes_count_against_general_limit(self, client):
        for _ in range(100):
            assert client.get("/nowhere").status_code == 404

        response = client.get("/health")

        assert response.status_code == 429
        assert response.json()["error"] == (
            "Too many requests from this IP, please try again later."
        )

    def test_cors_preflight(self, client):
        response = client.options(
            "/comment",
            HTTP_ORIGIN="http://localhost:3000",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
        )

        assert response.status_code == 200
        assert response["Access-Control-Allow-Origin"] == "http://localhost:3000"
        assert response["Access-Control-Allow-Credentials"] == "true"

    def test_cors_rejects_unknown_origin(self, client):
        response = client.get("/comments", HTTP_ORIGIN="https://evil.example")

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Not allowed by CORS"}

    def test_oversized_body(self, client):
        response = client.post("/comment", data="a" * 20000, content_type="text/plain")

        assert response.status_code == 413
        data = response.json()
        assert data["request_size"] == 20000
        assert data["size_limit"] == 10240

    @override_settings(DEBUG=True)
    def test_upstream_detail_exposed_in_debug(self, client):
        with mock.patch(
            "users.services.RandomUserClient",
            return_value=FakeRandomUserClient(fail=True),
        ):
            response = client.get("/populate")

        assert response.status_code == 502
        assert response.json()["detail"] == "connection refused"
