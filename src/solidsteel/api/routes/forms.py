"""Lead form endpoints.

Every JSON lead form goes through the same pipeline: honeypot check,
optional reCAPTCHA verification, schema validation, then delivery to the
form's CRM webhook. CRM failures never fail the submission.
"""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel, ValidationError

from solidsteel import config as config_module
from solidsteel.api.rate_limit import forms_limit, limiter
from solidsteel.integrations.crm import (
    CrmWebhookClient,
    contact_payload,
    get_crm_client,
    newsletter_payload,
    proforma_budget_payload,
    quote_request_payload,
)
from solidsteel.integrations.recaptcha import RecaptchaVerifier, get_recaptcha_verifier
from solidsteel.models.forms import (
    ContactSubmission,
    NewsletterSignup,
    ProformaBudgetRequest,
    QuoteRequest,
    is_honeypot_triggered,
)

log = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["forms"])

INVALID_FORM_DATA = "Invalid form data"
CONTACT_FIELDS = ("name", "email", "phone", "projectType", "message")


@dataclass(frozen=True)
class LeadForm:
    """How one lead form is validated, forwarded and reported."""

    form_type: str
    schema: type[BaseModel]
    payload: Callable[[Any], dict[str, Any]]
    webhook_url: Callable[[], str]
    request_prefix: str
    success_message: str
    honeypot_message: str
    failure_message: str
    summary: Callable[[Any], dict[str, Any]]


QUOTE_REQUEST = LeadForm(
    form_type="quote_request",
    schema=QuoteRequest,
    payload=quote_request_payload,
    webhook_url=lambda: config_module.settings.crm_webhook_quote_url,
    request_prefix="QR",
    success_message="Quote request submitted successfully",
    honeypot_message="Quote request submitted successfully",
    failure_message="Failed to process quote request",
    summary=lambda form: {
        "project_name": form.project_name,
        "client_email": form.client_email,
        "project_type": form.project_type,
        "budget_range": form.budget_range,
        "urgency": form.urgency,
        "attachments": len(form.attachments or []),
        "submitted_at": form.submitted_at,
    },
)

PROFORMA_BUDGET = LeadForm(
    form_type="proforma_budget_consultation",
    schema=ProformaBudgetRequest,
    payload=proforma_budget_payload,
    webhook_url=lambda: config_module.settings.crm_webhook_proforma_url,
    request_prefix="PBC",
    success_message="Proforma budget consultation request submitted successfully",
    honeypot_message="Consultation request submitted successfully",
    failure_message="Failed to process consultation request",
    summary=lambda form: {
        "project_name": form.project_name,
        "client_email": form.client_email,
        "company_name": form.company_name,
        "project_type": form.project_type,
        "estimated_budget": form.estimated_budget,
        "budget_deadline": form.budget_deadline,
        "consultation_purposes": len(form.consultation_purpose),
        "attachments": len(form.attachments or []),
        "submitted_at": form.submitted_at,
    },
)


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def _read_json_object(request: Request) -> dict[str, Any] | None:
    """Request body as a JSON object, or None if it is not one."""
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def _validation_errors(error: ValidationError) -> list[dict[str, Any]]:
    return [
        {"path": list(err["loc"]), "message": err["msg"], "type": err["type"]}
        for err in error.errors(include_url=False, include_context=False)
    ]


async def process_lead_form(
    request: Request,
    form: LeadForm,
    crm: CrmWebhookClient,
    recaptcha: RecaptchaVerifier,
) -> JSONResponse:
    try:
        data = await _read_json_object(request)
        if data is None:
            return JSONResponse(
                {"success": False, "message": INVALID_FORM_DATA, "errors": []},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        if is_honeypot_triggered(data):
            log.info("honeypot_triggered", form_type=form.form_type, client=_client_ip(request))
            return JSONResponse({"success": True, "message": form.honeypot_message})

        token = data.get("recaptchaToken")
        if token:
            result = await recaptcha.verify(str(token), _client_ip(request))
            if not result.success:
                return JSONResponse(
                    {"success": False, "message": "reCAPTCHA verification failed"},
                    status_code=status.HTTP_403_FORBIDDEN,
                )

        try:
            submission = form.schema.model_validate(data)
        except ValidationError as e:
            log.info("form_validation_failed", form_type=form.form_type, errors=e.error_count())
            return JSONResponse(
                {"success": False, "message": INVALID_FORM_DATA, "errors": _validation_errors(e)},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        delivery = await crm.deliver(
            form.webhook_url(), form.payload(submission), form_type=form.form_type
        )

        log.info(
            f"{form.form_type}_processed",
            **form.summary(submission),
            crm_success=delivery.success,
            crm_error=delivery.error or "none",
        )

        body: dict[str, Any] = {
            "success": True,
            "message": form.success_message,
            "requestId": f"{form.request_prefix}-{int(time.time() * 1000)}",
        }
        if config_module.settings.is_development:
            body["debug"] = {"crmSuccess": delivery.success, "crmError": delivery.error}
        return JSONResponse(body)

    except Exception:
        log.exception("form_processing_failed", form_type=form.form_type)
        return JSONResponse(
            {"success": False, "message": form.failure_message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@router.post("/quote-request", response_model=None)
@limiter.limit(forms_limit)
async def submit_quote_request(
    request: Request,
    crm: CrmWebhookClient = Depends(get_crm_client),
    recaptcha: RecaptchaVerifier = Depends(get_recaptcha_verifier),
) -> JSONResponse:
    """Quote request form submission."""
    return await process_lead_form(request, QUOTE_REQUEST, crm, recaptcha)


@router.post("/proforma-budget", response_model=None)
@limiter.limit(forms_limit)
async def submit_proforma_budget(
    request: Request,
    crm: CrmWebhookClient = Depends(get_crm_client),
    recaptcha: RecaptchaVerifier = Depends(get_recaptcha_verifier),
) -> JSONResponse:
    """Proforma budget consultation form submission."""
    return await process_lead_form(request, PROFORMA_BUDGET, crm, recaptcha)


# =============================================================================
# Contact
# =============================================================================


def _contact_redirect(path: str) -> RedirectResponse:
    return RedirectResponse(
        config_module.settings.site_url(path), status_code=status.HTTP_303_SEE_OTHER
    )


@router.post("/contact", response_model=None)
@limiter.limit(forms_limit)
async def submit_contact(
    request: Request,
    crm: CrmWebhookClient = Depends(get_crm_client),
) -> Response:
    """Contact form: JSON from the site's script, or a native HTML form post."""
    native_form = "application/json" not in request.headers.get("content-type", "")

    try:
        if native_form:
            form_data = await request.form()
            data: dict[str, Any] = {
                key: value for key, value in form_data.items() if isinstance(value, str)
            }
        else:
            parsed = await _read_json_object(request)
            if parsed is None:
                return JSONResponse(
                    {"success": False, "message": "Missing required fields"},
                    status_code=status.HTTP_400_BAD_REQUEST,
                )
            data = parsed

        if is_honeypot_triggered(data):
            log.info("honeypot_triggered", form_type="contact_form", client=_client_ip(request))
            if native_form:
                return _contact_redirect("/contact/thank-you")
            return JSONResponse({"success": True, "message": "Contact form submitted successfully"})

        fields = {
            name: value
            for name, value in data.items()
            if isinstance(value, str) and name in CONTACT_FIELDS
        }
        submission = ContactSubmission.model_validate(fields)

        if not submission.is_complete:
            if native_form:
                return _contact_redirect("/contact?error=missing-fields")
            return JSONResponse(
                {"success": False, "message": "Missing required fields"},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        delivery = await crm.deliver(
            config_module.settings.crm_webhook_contact_url,
            contact_payload(submission),
            form_type="contact_form",
        )
        log.info(
            "contact_form_processed",
            email=submission.email,
            project_type=submission.project_type or "General Inquiry",
            crm_success=delivery.success,
        )

        if native_form:
            return _contact_redirect("/contact/thank-you")
        return JSONResponse({"success": True, "message": "Contact form submitted successfully"})

    except Exception:
        log.exception("form_processing_failed", form_type="contact_form")
        return JSONResponse(
            {"success": False, "message": "Failed to process contact form"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


# =============================================================================
# Newsletter
# =============================================================================


@router.post("/newsletter", response_model=None)
@limiter.limit(forms_limit)
async def subscribe_newsletter(
    request: Request,
    crm: CrmWebhookClient = Depends(get_crm_client),
) -> JSONResponse:
    """Newsletter signup; forwarded when a newsletter webhook is configured."""
    try:
        data = await _read_json_object(request) or {}
        try:
            signup = NewsletterSignup.model_validate({"email": data.get("email") or ""})
        except ValidationError:
            return JSONResponse(
                {"error": "Valid email is required"}, status_code=status.HTTP_400_BAD_REQUEST
            )

        webhook_url = config_module.settings.crm_webhook_newsletter_url
        if webhook_url:
            await crm.deliver(
                webhook_url, newsletter_payload(signup.email), form_type="newsletter_signup"
            )
        log.info("newsletter_signup_processed", forwarded=bool(webhook_url))

        return JSONResponse({"success": True, "message": "Successfully subscribed to newsletter"})

    except Exception:
        log.exception("form_processing_failed", form_type="newsletter_signup")
        return JSONResponse(
            {"error": "Failed to process subscription"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
