"""Outbound integrations: CRM webhooks and reCAPTCHA."""

from solidsteel.integrations.crm import CrmDelivery, CrmWebhookClient, get_crm_client
from solidsteel.integrations.recaptcha import (
    RecaptchaResult,
    RecaptchaVerifier,
    get_recaptcha_verifier,
)

__all__ = [
    "CrmDelivery",
    "CrmWebhookClient",
    "RecaptchaResult",
    "RecaptchaVerifier",
    "get_crm_client",
    "get_recaptcha_verifier",
]
