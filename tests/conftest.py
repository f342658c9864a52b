"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from solidsteel import config as config_module
from solidsteel.api.app import create_app
from solidsteel.api.rate_limit import limiter
from solidsteel.config import Settings
from solidsteel.content import store as store_module
from solidsteel.content.store import ContentRepository
from solidsteel.integrations import crm as crm_module
from solidsteel.integrations import recaptcha as recaptcha_module
from solidsteel.integrations.crm import CrmWebhookClient, get_crm_client
from solidsteel.integrations.recaptcha import RecaptchaVerifier, get_recaptcha_verifier
from solidsteel.storage import blob as blob_module
from solidsteel.storage import project_images as project_images_module
from solidsteel.storage import proxy as proxy_module
from solidsteel.storage.blob import LocalBlobStore

ADMIN_USERNAME = "site-admin"
ADMIN_PASSWORD = "steel-beam-2024"
SESSION_SECRET = "test-session-secret-that-is-long-enough-0123"

QUOTE_WEBHOOK = "https://crm.test/webhooks/quote"
PROFORMA_WEBHOOK = "https://crm.test/webhooks/proforma"
CONTACT_WEBHOOK = "https://crm.test/webhooks/contact"

# Unprefixed variables the settings fall back to
_FALLBACK_ENV = (
    "GROUNDHOGG_WEBHOOK_QUOTE_URL",
    "GROUNDHOGG_WEBHOOK_PROFORMA_URL",
    "GROUNDHOGG_WEBHOOK_CONTACT_URL",
    "GROUNDHOGG_WEBHOOK_NEWSLETTER_URL",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "SECRET_COOKIE_PASSWORD",
    "RECAPTCHA_SECRET_KEY",
    "BLOB_READ_WRITE_TOKEN",
)


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Isolated settings: tmp content dir, local blob backend, no rate limits."""
    for name in _FALLBACK_ENV:
        monkeypatch.delenv(name, raising=False)

    test_settings = Settings(
        environment="development",
        content_dir=tmp_path / "content",
        blob_backend="local",
        blob_local_dir=tmp_path / "blob",
        blob_local_base_url="http://testserver/blob",
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        session_secret=SESSION_SECRET,
        crm_webhook_quote_url=QUOTE_WEBHOOK,
        crm_webhook_proforma_url=PROFORMA_WEBHOOK,
        crm_webhook_contact_url=CONTACT_WEBHOOK,
        crm_webhook_newsletter_url="",
        rate_limit_enabled=False,
    )
    monkeypatch.setattr(config_module, "settings", test_settings)

    # Singletons are rebuilt from the patched settings
    monkeypatch.setattr(store_module, "_repository", None)
    monkeypatch.setattr(blob_module, "_store", None)
    monkeypatch.setattr(project_images_module, "_mapper", None)
    monkeypatch.setattr(proxy_module, "_proxy", None)
    monkeypatch.setattr(crm_module, "_client", None)
    monkeypatch.setattr(recaptcha_module, "_verifier", None)
    monkeypatch.setattr(limiter, "enabled", False)

    return test_settings


@pytest.fixture
def repository(settings: Settings) -> ContentRepository:
    return store_module.get_content_repository()


@pytest.fixture
def blob_store(settings: Settings) -> LocalBlobStore:
    store = blob_module.get_blob_store()
    assert isinstance(store, LocalBlobStore)
    return store


# =============================================================================
# Outbound HTTP
# =============================================================================


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def json_bodies(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def crm_transport() -> RecordingTransport:
    return RecordingTransport(lambda request: httpx.Response(200, json={"status": "ok"}))


@pytest.fixture
def crm_client(crm_transport: RecordingTransport) -> CrmWebhookClient:
    return CrmWebhookClient(timeout=1.0, transport=crm_transport)


@pytest.fixture
def recaptcha_verifier() -> RecaptchaVerifier:
    # No secret: any token fails verification
    return RecaptchaVerifier("")


# =============================================================================
# App
# =============================================================================


@pytest.fixture
def app(
    settings: Settings, crm_client: CrmWebhookClient, recaptcha_verifier: RecaptchaVerifier
) -> FastAPI:
    application = create_app()
    application.dependency_overrides[get_crm_client] = lambda: crm_client
    application.dependency_overrides[get_recaptcha_verifier] = lambda: recaptcha_verifier
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    """Client carrying a valid admin session cookie."""
    response = client.post(
        "/api/admin/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return client
