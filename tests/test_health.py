"""
Tests for the landing page, docs and health endpoints.
"""


class TestHealthChecks:
    """Test monitoring endpoints"""

    def test_basic_health_check(self, client):
        """Basic health endpoint should be publicly accessible"""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health_check(self, client):
        """Detailed health check should include database status"""
        response = client.get("/api/v1/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"


class TestLandingPage:

    def test_root_links_to_docs(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/api-docs" in response.text

    def test_docs_served(self, client):
        response = client.get("/api-docs")

        assert response.status_code == 200

    def test_security_headers_present(self, client):
        response = client.get("/api/v1/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "default-src 'self'" in response.headers["Content-Security-Policy"]
