"""CRM webhook delivery.

Lead forms are forwarded to the CRM's webhook listener as flat JSON
payloads. Delivery never raises: a failed webhook is logged and reported
back to the caller, and the form submission still succeeds for the visitor.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx
import structlog

from solidsteel import config as config_module
from solidsteel.models.forms import ContactSubmission, ProformaBudgetRequest, QuoteRequest
from solidsteel.utils.resilience import WEBHOOK_RETRY, retry

log = structlog.get_logger()

_client: CrmWebhookClient | None = None


# =============================================================================
# Payloads
# =============================================================================


def quote_request_payload(form: QuoteRequest) -> dict[str, Any]:
    parts = [
        f"Project: {form.project_name}",
        f"Description: {form.project_description}",
        f"Location: {form.project_location}",
        f"Budget: {form.budget_range}",
        f"Urgency: {form.urgency}",
    ]
    if form.start_date:
        parts.append(f"Preferred Start: {form.start_date}")
    if form.estimated_duration:
        parts.append(f"Duration: {form.estimated_duration}")
    if form.additional_requirements:
        parts.append(f"Additional Requirements: {form.additional_requirements}")

    return {
        "name": form.client_name,
        "email": form.client_email,
        "phone": form.client_phone,
        "project_name": form.project_name,
        "project_type": form.project_type,
        "project_location": form.project_location,
        "budget_range": form.budget_range,
        "urgency": form.urgency,
        "message": "\n\n".join(parts),
        "source": "Website Quote Request",
        "form_type": "quote_request",
    }


def _proforma_message(form: ProformaBudgetRequest) -> str:
    purposes = ", ".join(form.consultation_purpose)

    sections: list[list[str]] = [
        [
            "PROFORMA BUDGET CONSULTATION REQUEST",
        ],
        [
            f"Project: {form.project_name}",
            f"Type: {form.project_type}",
            f"Location: {form.project_location}",
        ],
        [
            "PROJECT SPECIFICATIONS:",
            f"- Building Size: {form.building_size}",
            *([f"- Site Size: {form.site_size}"] if form.site_size else []),
            f"- Floors: {form.number_of_floors}",
            f"- Occupancy: {form.occupancy_type}",
            f"- Construction Type: {form.construction_type}",
        ],
        [
            "BUDGET PARAMETERS:",
            f"- Estimated Budget: {form.estimated_budget}",
            f"- Budget Flexibility: {form.budget_flexibility}",
            f"- Funding Source: {form.funding_source}",
            f"- Financing Needed: {form.financing_needed}",
        ],
        [
            "TIMELINE:",
            *([f"- Desired Start: {form.project_start_date}"] if form.project_start_date else []),
            *(
                [f"- Desired Completion: {form.desired_completion_date}"]
                if form.desired_completion_date
                else []
            ),
            f"- Budget Needed By: {form.budget_deadline}",
        ],
        ["CONSULTATION PURPOSE:", purposes],
        [
            "REQUIREMENTS:",
            f"- Site Visit: {form.site_visit_required}",
            f"- Presentation: {form.presentation_required}",
            *(
                [f"- Additional Services: {', '.join(form.additional_services)}"]
                if form.additional_services
                else []
            ),
        ],
        ["PROJECT DESCRIPTION:", form.project_description],
    ]
    if form.specific_concerns:
        sections.append(["SPECIFIC CONCERNS:", form.specific_concerns])
    if form.special_requirements:
        sections.append(["SPECIAL REQUIREMENTS:", form.special_requirements])
    sections.append(
        [
            f"Previous Estimates: {form.previous_estimates}",
            f"Attachments: {len(form.attachments or [])} files uploaded",
        ]
    )
    return "\n\n".join("\n".join(lines) for lines in sections)


def proforma_budget_payload(form: ProformaBudgetRequest) -> dict[str, Any]:
    return {
        "name": form.client_name,
        "email": form.client_email,
        "phone": form.client_phone,
        "company": form.company_name,
        "title": form.client_title or "",
        "project_name": form.project_name,
        "project_type": form.project_type,
        "project_location": form.project_location,
        "building_size": form.building_size,
        "estimated_budget": form.estimated_budget,
        "budget_deadline": form.budget_deadline,
        "consultation_purposes": ", ".join(form.consultation_purpose),
        "funding_source": form.funding_source,
        "financing_needed": form.financing_needed,
        "message": _proforma_message(form),
        "source": "Website Proforma Budget Consultation",
        "form_type": "proforma_budget_consultation",
        "priority": "urgent" if form.budget_deadline == "asap" else "normal",
    }


def contact_payload(form: ContactSubmission) -> dict[str, Any]:
    message = (
        f"Project Type: {form.project_type}\n\nMessage: {form.message}"
        if form.project_type
        else form.message
    )
    return {
        "name": form.name,
        "email": form.email,
        "phone": form.phone,
        "project_type": form.project_type or "General Inquiry",
        "message": message,
        "source": "Website Contact Form API",
        "form_type": "contact_form",
        "submitted_at": datetime.now(UTC).isoformat(),
    }


def newsletter_payload(email: str) -> dict[str, Any]:
    return {
        "email": email,
        "source": "Website Newsletter Signup",
        "form_type": "newsletter_signup",
        "submitted_at": datetime.now(UTC).isoformat(),
    }


# =============================================================================
# Delivery
# =============================================================================


@dataclass
class CrmDelivery:
    """Outcome of one webhook delivery."""

    success: bool
    error: str | None = None
    status_code: int | None = None


class CrmWebhookClient:
    """Posts lead payloads to the CRM webhook listener."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        user_agent: str = "SolidSteelWebsite/1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport

    @retry(config=WEBHOOK_RETRY)
    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            return await client.post(
                url,
                json=payload,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self._user_agent,
                },
            )

    async def deliver(self, url: str, payload: dict[str, Any], *, form_type: str) -> CrmDelivery:
        """POST ``payload`` to ``url``. Never raises."""
        if not url:
            log.warning("crm_webhook_not_configured", form_type=form_type)
            return CrmDelivery(
                success=False, error=f"Webhook URL for {form_type} is not configured"
            )

        try:
            response = await self._post(url, payload)
        except httpx.TimeoutException:
            log.error("crm_webhook_timeout", form_type=form_type, timeout=self._timeout)
            return CrmDelivery(success=False, error="Request timed out")
        except httpx.HTTPError as e:
            log.error("crm_webhook_error", form_type=form_type, error=str(e))
            return CrmDelivery(success=False, error=str(e) or "Network error")

        if response.is_success:
            log.info("crm_webhook_delivered", form_type=form_type, status=response.status_code)
            return CrmDelivery(success=True, status_code=response.status_code)

        body = response.text[:500]
        log.error(
            "crm_webhook_failed",
            form_type=form_type,
            status=response.status_code,
            response=body,
        )
        return CrmDelivery(
            success=False,
            error=f"HTTP {response.status_code}: {body}",
            status_code=response.status_code,
        )


def get_crm_client() -> CrmWebhookClient:
    """Get or create the global CRM client singleton."""
    global _client  # noqa: PLW0603
    if _client is None:
        settings = config_module.settings
        _client = CrmWebhookClient(
            timeout=settings.crm_timeout_seconds, user_agent=settings.crm_user_agent
        )
    return _client
