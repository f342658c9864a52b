"""Lead form schemas.

Field names follow the site's form payloads (camelCase); minimum lengths
mirror the client-side validation so both sides reject the same input.
"""

import re

from pydantic import EmailStr, Field, field_validator

from solidsteel.models.common import CamelModel

# Fields bots fill in but humans never see
HONEYPOT_FIELDS = ("website", "company_url")

NEWSLETTER_EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def is_honeypot_triggered(data: dict) -> bool:
    """True when any honeypot field carries a truthy value."""
    return any(data.get(name) for name in HONEYPOT_FIELDS)


class QuoteRequest(CamelModel):
    """Quote request form."""

    project_name: str = Field(..., min_length=2)
    project_description: str = Field(..., min_length=50)
    client_name: str = Field(..., min_length=2)
    client_email: EmailStr
    client_phone: str = Field(..., min_length=10)
    project_type: str = Field(..., min_length=1)
    start_date: str | None = None
    estimated_duration: str | None = None
    budget_range: str = Field(..., min_length=1)
    project_location: str = Field(..., min_length=2)
    urgency: str = Field(..., min_length=1)
    additional_requirements: str | None = None
    attachments: list[str] | None = None
    submitted_at: str


class ProformaBudgetRequest(CamelModel):
    """Proforma budget consultation form."""

    # Project information
    project_name: str = Field(..., min_length=2)
    project_type: str = Field(..., min_length=1)
    project_location: str = Field(..., min_length=2)
    project_description: str = Field(..., min_length=100)

    # Specifications
    building_size: str = Field(..., min_length=1)
    site_size: str | None = None
    number_of_floors: str = Field(..., min_length=1)
    occupancy_type: str = Field(..., min_length=1)
    construction_type: str = Field(..., min_length=1)

    # Budget parameters
    estimated_budget: str = Field(..., min_length=1)
    budget_flexibility: str = Field(..., min_length=1)
    funding_source: str = Field(..., min_length=1)
    financing_needed: str = Field(..., min_length=1)

    # Timeline
    project_start_date: str | None = None
    desired_completion_date: str | None = None
    budget_deadline: str = Field(..., min_length=1)

    # Consultation specifics
    consultation_purpose: list[str] = Field(..., min_length=1)
    specific_concerns: str | None = None
    previous_estimates: str = Field(..., min_length=1)

    # Contact
    client_name: str = Field(..., min_length=2)
    client_title: str | None = None
    company_name: str = Field(..., min_length=2)
    client_email: EmailStr
    client_phone: str = Field(..., min_length=10)

    # Additional requirements
    site_visit_required: str = Field(..., min_length=1)
    presentation_required: str = Field(..., min_length=1)
    additional_services: list[str] | None = None
    special_requirements: str | None = None
    attachments: list[str] | None = None
    submitted_at: str


class ContactSubmission(CamelModel):
    """Contact form; posted as JSON or as a native HTML form."""

    name: str = ""
    email: str = ""
    phone: str = ""
    project_type: str = ""
    message: str = ""

    @property
    def is_complete(self) -> bool:
        return all((self.name, self.email, self.phone, self.message))


class NewsletterSignup(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if not NEWSLETTER_EMAIL_RE.match(value):
            raise ValueError("Valid email is required")
        return value
