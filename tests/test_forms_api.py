"""Tests for the lead form endpoints."""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from solidsteel.api.app import create_app
from solidsteel.api.rate_limit import limiter
from solidsteel.config import Settings
from solidsteel.integrations.crm import CrmWebhookClient, get_crm_client
from solidsteel.integrations.recaptcha import RecaptchaVerifier, get_recaptcha_verifier

from tests.conftest import CONTACT_WEBHOOK, PROFORMA_WEBHOOK, QUOTE_WEBHOOK, RecordingTransport

QUOTE_REQUEST = {
    "projectName": "Warehouse Expansion",
    "projectDescription": (
        "Add a 20,000 sq ft pre-engineered steel warehouse to our existing facility in Embrun."
    ),
    "clientName": "Jane Doe",
    "clientEmail": "jane@acme-builders.ca",
    "clientPhone": "613-555-0199",
    "projectType": "warehouse",
    "budgetRange": "1m-5m",
    "projectLocation": "Embrun, ON",
    "urgency": "within-3-months",
    "submittedAt": "2024-05-01T12:00:00Z",
}

PROFORMA_REQUEST = {
    "projectName": "Russell Medical Building",
    "projectType": "commercial",
    "projectLocation": "Russell, ON",
    "projectDescription": (
        "Two storey medical office building with ground floor retail units. "
        "We need a budget to present to our lender before committing to design."
    ),
    "buildingSize": "18,000 sq ft",
    "numberOfFloors": "2",
    "occupancyType": "medical",
    "constructionType": "steel",
    "estimatedBudget": "5m-10m",
    "budgetFlexibility": "moderate",
    "fundingSource": "bank",
    "financingNeeded": "yes",
    "budgetDeadline": "asap",
    "consultationPurpose": ["financing", "feasibility"],
    "previousEstimates": "none",
    "clientName": "Sam Tremblay",
    "companyName": "Tremblay Holdings",
    "clientEmail": "sam@tremblay-holdings.ca",
    "clientPhone": "613-555-0142",
    "siteVisitRequired": "yes",
    "presentationRequired": "no",
    "submittedAt": "2024-05-01T12:00:00Z",
}

CONTACT = {
    "name": "Alex Martin",
    "email": "alex@martin-logistics.ca",
    "phone": "613-555-0110",
    "projectType": "industrial",
    "message": "Looking for a quote on a truck maintenance bay.",
}


class TestQuoteRequest:
    def test_valid_submission_reaches_crm(
        self, client: TestClient, crm_transport: RecordingTransport
    ) -> None:
        response = client.post("/api/quote-request", json=QUOTE_REQUEST)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["requestId"].startswith("QR-")
        assert body["debug"] == {"crmSuccess": True, "crmError": None}

        assert [str(r.url) for r in crm_transport.requests] == [QUOTE_WEBHOOK]
        payload = crm_transport.json_bodies()[0]
        assert payload["form_type"] == "quote_request"
        assert payload["email"] == "jane@acme-builders.ca"
        assert payload["message"].startswith("Project: Warehouse Expansion\n\nDescription:")

    def test_honeypot_pretends_success(
        self, client: TestClient, crm_transport: RecordingTransport
    ) -> None:
        response = client.post("/api/quote-request", json={**QUOTE_REQUEST, "website": "spam.biz"})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert "requestId" not in response.json()
        assert crm_transport.requests == []

    def test_validation_failure(
        self, client: TestClient, crm_transport: RecordingTransport
    ) -> None:
        response = client.post(
            "/api/quote-request", json={**QUOTE_REQUEST, "projectDescription": "too short"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid form data"
        assert body["errors"][0]["path"] == ["projectDescription"]
        assert crm_transport.requests == []

    def test_malformed_json(self, client: TestClient) -> None:
        response = client.post(
            "/api/quote-request",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_failed_recaptcha_is_forbidden(
        self, client: TestClient, crm_transport: RecordingTransport
    ) -> None:
        response = client.post(
            "/api/quote-request", json={**QUOTE_REQUEST, "recaptchaToken": "token"}
        )
        assert response.status_code == 403
        assert response.json()["message"] == "reCAPTCHA verification failed"
        assert crm_transport.requests == []

    def test_passing_recaptcha(self, app: FastAPI, crm_transport: RecordingTransport) -> None:
        google = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"success": True, "score": 0.9})
        )
        app.dependency_overrides[get_recaptcha_verifier] = lambda: RecaptchaVerifier(
            "secret", transport=google
        )
        response = TestClient(app).post(
            "/api/quote-request", json={**QUOTE_REQUEST, "recaptchaToken": "token"}
        )
        assert response.status_code == 200
        assert len(crm_transport.requests) == 1

    def test_malformed_recaptcha_reply_is_forbidden(
        self, app: FastAPI, crm_transport: RecordingTransport
    ) -> None:
        google = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"success": True, "score": "high"})
        )
        app.dependency_overrides[get_recaptcha_verifier] = lambda: RecaptchaVerifier(
            "secret", transport=google
        )
        response = TestClient(app).post(
            "/api/quote-request", json={**QUOTE_REQUEST, "recaptchaToken": "token"}
        )
        assert response.status_code == 403
        assert crm_transport.requests == []

    def test_crm_failure_still_succeeds(self, app: FastAPI) -> None:
        failing = RecordingTransport(lambda request: httpx.Response(502, text="bad gateway"))
        app.dependency_overrides[get_crm_client] = lambda: CrmWebhookClient(transport=failing)

        response = TestClient(app).post("/api/quote-request", json=QUOTE_REQUEST)

        assert response.status_code == 200
        debug = response.json()["debug"]
        assert debug["crmSuccess"] is False
        assert debug["crmError"] == "HTTP 502: bad gateway"

    def test_no_debug_block_outside_development(
        self, client: TestClient, settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "environment", "production")
        response = client.post("/api/quote-request", json=QUOTE_REQUEST)
        assert response.status_code == 200
        assert "debug" not in response.json()


class TestProformaBudget:
    def test_valid_submission(self, client: TestClient, crm_transport: RecordingTransport) -> None:
        response = client.post("/api/proforma-budget", json=PROFORMA_REQUEST)

        assert response.status_code == 200
        assert response.json()["requestId"].startswith("PBC-")
        assert [str(r.url) for r in crm_transport.requests] == [PROFORMA_WEBHOOK]

        payload = crm_transport.json_bodies()[0]
        assert payload["priority"] == "urgent"
        assert payload["consultation_purposes"] == "financing, feasibility"
        assert "BUDGET PARAMETERS:" in payload["message"]

    def test_requires_a_consultation_purpose(self, client: TestClient) -> None:
        response = client.post(
            "/api/proforma-budget", json={**PROFORMA_REQUEST, "consultationPurpose": []}
        )
        assert response.status_code == 400
        paths = [err["path"] for err in response.json()["errors"]]
        assert ["consultationPurpose"] in paths


class TestContact:
    def test_json_submission(self, client: TestClient, crm_transport: RecordingTransport) -> None:
        response = client.post("/api/contact", json=CONTACT)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Contact form submitted successfully",
        }
        assert [str(r.url) for r in crm_transport.requests] == [CONTACT_WEBHOOK]
        payload = crm_transport.json_bodies()[0]
        assert payload["message"].startswith("Project Type: industrial")

    def test_json_missing_fields(self, client: TestClient) -> None:
        response = client.post("/api/contact", json={**CONTACT, "phone": ""})
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required fields"

    def test_native_form_redirects_to_thank_you(
        self, client: TestClient, crm_transport: RecordingTransport
    ) -> None:
        response = client.post("/api/contact", data=CONTACT, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "https://solidsteelmgt.ca/contact/thank-you"
        assert len(crm_transport.requests) == 1

    def test_native_form_missing_fields_redirects_back(self, client: TestClient) -> None:
        response = client.post(
            "/api/contact", data={"name": "Alex"}, follow_redirects=False
        )
        assert response.status_code == 303
        assert response.headers["location"] == (
            "https://solidsteelmgt.ca/contact?error=missing-fields"
        )

    def test_default_project_type(
        self, client: TestClient, crm_transport: RecordingTransport
    ) -> None:
        client.post("/api/contact", json={**CONTACT, "projectType": ""})
        payload = crm_transport.json_bodies()[0]
        assert payload["project_type"] == "General Inquiry"
        assert payload["message"] == CONTACT["message"]


class TestNewsletter:
    def test_invalid_email(self, client: TestClient) -> None:
        response = client.post("/api/newsletter", json={"email": "not-an-email"})
        assert response.status_code == 400
        assert response.json() == {"error": "Valid email is required"}

    def test_signup_without_webhook(
        self, client: TestClient, crm_transport: RecordingTransport
    ) -> None:
        response = client.post("/api/newsletter", json={"email": "pat@site.ca"})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert crm_transport.requests == []

    def test_signup_forwarded_when_configured(
        self,
        client: TestClient,
        settings: Settings,
        crm_transport: RecordingTransport,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "crm_webhook_newsletter_url", "https://crm.test/newsletter")
        response = client.post("/api/newsletter", json={"email": "pat@site.ca"})
        assert response.status_code == 200
        assert crm_transport.json_bodies()[0]["form_type"] == "newsletter_signup"


class TestRateLimit:
    def test_forms_limit_returns_429(
        self, settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_forms", "1/minute")
        monkeypatch.setattr(limiter, "enabled", True)
        limiter.reset()
        client = TestClient(create_app())

        try:
            first = client.post("/api/newsletter", json={"email": "pat@site.ca"})
            second = client.post("/api/newsletter", json={"email": "pat@site.ca"})
        finally:
            limiter.reset()

        assert first.status_code == 200
        assert second.status_code == 429
