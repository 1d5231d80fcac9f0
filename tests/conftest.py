"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Infrastructure: mock_settings, mock_logfire, logfire_capture, respx_mock
2. Messaging: mock_messaging_service, failing_messaging_service, reply_composer, event_dispatcher
3. Webhook data: make_event, make_envelope, sign_body
4. HTTP: test_client, webhook_outbox
"""

import os
from contextlib import contextmanager
from unittest.mock import MagicMock, Mock, patch

import pytest

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import respx

from src.services.event_dispatcher import EventDispatcher
from src.services.messaging_protocol import MockMessagingService
from src.services.reply_composer import ReplyComposer
from src.services.signature import compute_signature

TEST_APP_SECRET = "test-app-secret"
TEST_VERIFY_TOKEN = "test-verify-token"
TEST_PAGE_TOKEN = "test-page-token"
PAGE_ID = "page-123"
USER_ID = "user-456"


@pytest.fixture
def respx_mock():
    """Respx mock fixture for HTTP mocking."""
    with respx.mock:
        yield respx


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def settings_factory():
    """Build Settings with test defaults; keyword arguments override."""
    from src.config import Settings

    def _factory(**overrides):
        values = {
            "messenger_app_secret": TEST_APP_SECRET,
            "messenger_validation_token": TEST_VERIFY_TOKEN,
            "messenger_page_access_token": TEST_PAGE_TOKEN,
            "server_url": "https://bot.example.com",
            "env": "local",
            "logfire_token": None,
            "sentry_dsn": None,
        }
        values.update(overrides)
        return Settings(**values)

    return _factory


@pytest.fixture
def mock_settings(monkeypatch, settings_factory):
    """Mock application settings everywhere get_settings() is called."""
    settings = settings_factory()

    for target in (
        "src.config.get_settings",
        "src.main.get_settings",
        "src.api.webhook.get_settings",
        "src.api.health.get_settings",
    ):
        monkeypatch.setattr(target, lambda: settings)
    return settings


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Patches the module-level ``logfire`` reference in every module that logs.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield MagicMock()

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warning = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_pydantic = Mock()

    for module in (
        "src.main",
        "src.background",
        "src.logging_config",
        "src.middleware.correlation_id",
        "src.services.facebook_service",
        "src.services.messaging_protocol",
        "src.services.reply_composer",
        "src.services.event_dispatcher",
    ):
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire calls for assertion as (level, args, kwargs) tuples.
    """
    captured_logs = []

    def _capture(level):
        def _record(*args, **kwargs):
            captured_logs.append((level, args, kwargs))

        return _record

    with (
        patch("logfire.info", side_effect=_capture("info")),
        patch("logfire.warning", side_effect=_capture("warning")),
        patch("logfire.error", side_effect=_capture("error")),
    ):
        yield captured_logs


# =============================================================================
# Messaging
# =============================================================================


@pytest.fixture
def mock_messaging_service():
    """Messaging service that records sends and scheduled follow-ups."""
    return MockMessagingService()


@pytest.fixture
def failing_messaging_service():
    """Messaging service whose every send fails with a 500."""
    return MockMessagingService(should_fail_send=True)


@pytest.fixture
def reply_composer(mock_messaging_service):
    return ReplyComposer(mock_messaging_service, follow_up_delay_seconds=1.0)


@pytest.fixture
def event_dispatcher(reply_composer):
    return EventDispatcher(reply_composer)


# =============================================================================
# Webhook data
# =============================================================================


@pytest.fixture
def make_event():
    """Build a raw messaging event; pass the variant as a keyword argument.

    Example:
        make_event(message={"mid": "m1", "text": "menu"})
    """

    def _factory(sender_id=USER_ID, recipient_id=PAGE_ID, timestamp=1458692752478, **variant):
        event = {
            "sender": {"id": sender_id},
            "recipient": {"id": recipient_id},
            "timestamp": timestamp,
        }
        event.update(variant)
        return event

    return _factory


@pytest.fixture
def make_envelope():
    """Wrap raw events into a single-entry webhook body (as a dict)."""

    def _factory(*events, object="page", page_id=PAGE_ID):
        return {
            "object": object,
            "entry": [{"id": page_id, "time": 1458692752478, "messaging": list(events)}],
        }

    return _factory


@pytest.fixture
def sign_body():
    """Return the X-Hub-Signature value for a raw body under the test secret."""

    def _sign(raw_body: bytes, secret: str = TEST_APP_SECRET) -> str:
        return compute_signature(raw_body, secret)

    return _sign


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def webhook_outbox(monkeypatch, event_dispatcher, mock_messaging_service):
    """Route webhook dispatch through the mock messaging service.

    Returns the MockMessagingService so tests can inspect its outbox.
    """
    monkeypatch.setattr(
        "src.api.webhook.get_event_dispatcher", lambda settings: event_dispatcher
    )
    return mock_messaging_service


@pytest.fixture
def test_client(mock_settings, mock_logfire):
    """FastAPI TestClient for E2E tests (lifespan not started)."""
    from fastapi.testclient import TestClient
    from src.main import app

    return TestClient(app)
