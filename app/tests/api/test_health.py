from app.config import RATE_LIMIT_MAX_REQUESTS


class TestHealthEndpoint:
    def test_health_reports_mail_mode(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["service"] == "Mitra Sanitär Backend"
        assert body["email"]["mode"] == "simulated"
        assert body["email"]["testMode"] is True
        assert body["email"]["credentialsValid"] is False
        assert "contact" in body["endpoints"]

    def test_security_headers_are_set(self, client):
        response = client.get("/api/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Cross-Origin-Resource-Policy"] == "cross-origin"
        assert "Content-Security-Policy" not in response.headers

    def test_cors_allows_frontend_origin(self, client):
        response = client.options(
            "/api/contact",
            headers={
                "Origin": "http://localhost:4200",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:4200"


class TestFallbackResponses:
    def test_unknown_route_returns_404_body(self, client):
        response = client.get("/api/gibt-es-nicht")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Route nicht gefunden"
        assert body["path"] == "/api/gibt-es-nicht"

    def test_rate_limit_returns_429(self, rate_limited_client):
        for _ in range(RATE_LIMIT_MAX_REQUESTS):
            assert rate_limited_client.get("/api/debug-pdfs").status_code == 403

        response = rate_limited_client.get("/api/debug-pdfs")

        assert response.status_code == 429
        assert response.json()["error"].startswith("Zu viele Anfragen")
        assert "resetTime" in response.json()
        assert int(response.headers["Retry-After"]) > 0
