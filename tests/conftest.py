"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Settings: test_settings
2. Mock Services: mock_reply_service, mock_messaging_service
3. Payload builders: make_text_event, make_postback_event, make_page_payload
4. HTTP: test_client, signed_post
5. Logging: logfire_capture
"""

import json
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Logfire is never configured in unit tests
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import logfire  # noqa: E402

from src.config import Settings, get_settings  # noqa: E402
from src.models.agent_models import GenerationResult  # noqa: E402
from src.models.message_models import DeliveryResult  # noqa: E402
from src.services.agent_service import cached_reply_service  # noqa: E402
from src.services.event_dispatcher import EventDispatcher  # noqa: E402
from src.services.signature import compute_signature  # noqa: E402

TEST_APP_SECRET = "test-app-secret"
TEST_VERIFY_TOKEN = "test-verify-token"
TEST_PAGE_TOKEN = "test-page-token"
TEST_GEMINI_KEY = "test-gemini-key"


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def test_settings():
    """Fully configured settings, isolated from .env files."""
    return Settings(
        _env_file=None,
        gemini_api_key=TEST_GEMINI_KEY,
        gemini_model="gemini-1.5-flash",
        facebook_verify_token=TEST_VERIFY_TOKEN,
        facebook_page_access_token=TEST_PAGE_TOKEN,
        facebook_app_secret=TEST_APP_SECRET,
        environment="test",
        logfire_token=None,
        sentry_dsn=None,
    )


@pytest.fixture(autouse=True)
def clear_reply_service_cache():
    """Each test starts without cached Gemini clients."""
    cached_reply_service.cache_clear()
    yield
    cached_reply_service.cache_clear()


# =============================================================================
# Mock Services
# =============================================================================


@pytest.fixture
def mock_reply_service():
    """Reply service whose generate() returns a fixed successful reply."""
    service = MagicMock()
    service.generate = AsyncMock(
        return_value=GenerationResult(text="Hello from Gemini!")
    )
    return service


@pytest.fixture
def mock_messaging_service():
    """Messaging service that accepts every reply."""

    async def _send(reply):
        return DeliveryResult(
            recipient_id=reply.recipient_id,
            ok=True,
            status_code=200,
            message_id="mid.test",
        )

    service = MagicMock()
    service.send_message = AsyncMock(side_effect=_send)
    return service


@pytest.fixture
def dispatcher(mock_reply_service, mock_messaging_service):
    """EventDispatcher wired to the mock services."""
    return EventDispatcher(
        reply_service=mock_reply_service,
        messaging_service=mock_messaging_service,
    )


# =============================================================================
# Payload builders
# =============================================================================


@pytest.fixture
def make_text_event():
    def _make(text="Hi", sender_id="user-456", recipient_id="page-123", **message):
        return {
            "sender": {"id": sender_id},
            "recipient": {"id": recipient_id},
            "timestamp": 1234567890,
            "message": {"mid": "m_abc", "text": text, **message},
        }

    return _make


@pytest.fixture
def make_postback_event():
    def _make(payload="GET_STARTED", sender_id="user-456", recipient_id="page-123"):
        return {
            "sender": {"id": sender_id},
            "recipient": {"id": recipient_id},
            "timestamp": 1234567890,
            "postback": {"title": "Get Started", "payload": payload},
        }

    return _make


@pytest.fixture
def make_page_payload():
    def _make(*events, page_id="page-123"):
        return {
            "object": "page",
            "entry": [
                {"id": page_id, "time": 1234567890, "messaging": list(events)}
            ],
        }

    return _make


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def test_client(test_settings, dispatcher):
    """FastAPI TestClient with settings and dispatcher overridden."""
    from fastapi.testclient import TestClient

    from src.api.dependencies import provide_event_dispatcher
    from src.main import app

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[provide_event_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signed_post(test_client):
    """POST a body to /webhook with a valid signature.

    Accepts a dict (serialized to JSON) or raw bytes.
    """

    def _post(body, secret=TEST_APP_SECRET, client=None):
        raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        return (client or test_client).post(
            "/webhook",
            content=raw,
            headers={
                "Content-Type": "application/json",
                "X-Hub-Signature-256": compute_signature(raw, secret),
            },
        )

    return _post


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def logfire_capture():
    """Capture Logfire calls for assertion."""
    captured_logs = []

    def _capture(level):
        def _record(*args, **kwargs):
            captured_logs.append((level, args, kwargs))

        return _record

    with (
        patch.object(logfire, "info", side_effect=_capture("info")),
        patch.object(logfire, "warning", side_effect=_capture("warning")),
        patch.object(logfire, "error", side_effect=_capture("error")),
    ):
        yield captured_logs
