"""End-to-end tests for main application."""

import pytest
from fastapi.testclient import TestClient

from src.config import ConfigMissingError
from src.main import APP_VERSION, app


class TestMainApplication:
    """Test FastAPI application initialization."""

    def test_app_initialization(self):
        """Test that FastAPI app is initialized correctly."""
        assert app.title == "Famous Greek Messenger Bot"
        assert app.version == APP_VERSION

    def test_root_endpoint(self, test_client):
        """Test root endpoint."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Famous Greek Messenger Bot"
        assert data["graph_api_version"] == "v18.0"

    def test_router_registration(self):
        """Test that routers are registered."""
        assert app.url_path_for("root") == "/"
        assert app.url_path_for("health") == "/health"
        assert app.url_path_for("verify_webhook") == "/webhook"
        assert app.url_path_for("handle_webhook") == "/webhook"
        assert app.url_path_for("authorize") == "/authorize"

    def test_correlation_id_echoed(self, test_client):
        response = test_client.get("/health", headers={"X-Correlation-ID": "trace-1"})
        assert response.headers["X-Correlation-ID"] == "trace-1"

    def test_correlation_id_generated(self, test_client):
        response = test_client.get("/health")
        assert len(response.headers["X-Correlation-ID"]) == 36


class TestLifespan:
    """Test startup and shutdown."""

    def test_startup_and_shutdown(self, mock_settings, mock_logfire):
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200

        mock_logfire.configure.assert_called_once()
        messages = [call.args[0] for call in mock_logfire.info.call_args_list]
        assert "Application startup complete" in messages
        assert "Application shutdown complete" in messages

    def test_startup_logs_masked_token(self, mock_settings, mock_logfire):
        with TestClient(app):
            pass

        startup = next(
            call
            for call in mock_logfire.info.call_args_list
            if call.args[0] == "Application startup complete"
        )
        assert startup.kwargs["page_access_token"] != mock_settings.messenger_page_access_token

    def test_missing_config_aborts_startup(self, monkeypatch, mock_logfire):
        def _missing():
            raise ConfigMissingError(["MESSENGER_APP_SECRET"])

        monkeypatch.setattr("src.main.get_settings", _missing)

        with pytest.raises(ConfigMissingError):
            with TestClient(app):
                pass

        mock_logfire.error.assert_called_once_with(
            "Missing config values", fields=["MESSENGER_APP_SECRET"]
        )
