"""Configuration management for the Solid Steel site service."""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Unprefixed variables already used by the site's deployment
_ENV_FALLBACKS: dict[str, str] = {
    "crm_webhook_quote_url": "GROUNDHOGG_WEBHOOK_QUOTE_URL",
    "crm_webhook_proforma_url": "GROUNDHOGG_WEBHOOK_PROFORMA_URL",
    "crm_webhook_contact_url": "GROUNDHOGG_WEBHOOK_CONTACT_URL",
    "crm_webhook_newsletter_url": "GROUNDHOGG_WEBHOOK_NEWSLETTER_URL",
    "admin_username": "ADMIN_USERNAME",
}

_SECRET_FALLBACKS: dict[str, str] = {
    "admin_password": "ADMIN_PASSWORD",
    "session_secret": "SECRET_COOKIE_PASSWORD",
    "recaptcha_secret_key": "RECAPTCHA_SECRET_KEY",
    "blob_read_write_token": "BLOB_READ_WRITE_TOKEN",
}

MIN_SESSION_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SOLIDSTEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Runtime environment (development, staging, production)",
    )
    server_host: str = Field(default="localhost", description="Server bind host")
    server_port: int = Field(default=3000, description="Server bind port")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    public_url: str = Field(
        default="https://solidsteelmgt.ca",
        description="Public base URL of the site (sitemap, redirects, CORS)",
    )
    site_name: str = Field(default="Solid Steel Management", description="Company name")
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Extra allowed CORS origins besides public_url",
    )

    # Admin session
    admin_username: str = Field(default="", description="Admin login username")
    admin_password: SecretStr = Field(default=SecretStr(""), description="Admin login password")
    session_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Signing secret for the admin session cookie (32+ chars)",
    )
    session_cookie_name: str = Field(
        default="solid-steel-admin-session", description="Admin session cookie name"
    )
    session_ttl_hours: int = Field(
        default=8, ge=1, le=168, description="Admin session lifetime (hours)"
    )
    session_algorithm: str = Field(default="HS256", description="Session JWT algorithm")
    cookie_secure: bool | None = Field(
        default=None,
        description="Force Secure cookies on/off (default: on in production only)",
    )

    # CRM webhooks
    crm_webhook_quote_url: str = Field(default="", description="CRM webhook for quote requests")
    crm_webhook_proforma_url: str = Field(
        default="", description="CRM webhook for proforma budget consultations"
    )
    crm_webhook_contact_url: str = Field(default="", description="CRM webhook for contact form")
    crm_webhook_newsletter_url: str = Field(
        default="", description="CRM webhook for newsletter signups (optional)"
    )
    crm_timeout_seconds: float = Field(
        default=10.0, gt=0, le=60, description="Timeout for CRM webhook calls"
    )
    crm_user_agent: str = Field(
        default="SolidSteelWebsite/1.0", description="User-Agent sent to the CRM"
    )

    # reCAPTCHA
    recaptcha_secret_key: SecretStr = Field(
        default=SecretStr(""), description="reCAPTCHA secret key"
    )
    recaptcha_verify_url: str = Field(
        default="https://www.google.com/recaptcha/api/siteverify",
        description="reCAPTCHA verification endpoint",
    )
    recaptcha_min_score: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Minimum accepted reCAPTCHA score"
    )
    recaptcha_timeout_seconds: float = Field(
        default=5.0, gt=0, description="Timeout for reCAPTCHA verification"
    )

    # Blob storage
    blob_backend: Literal["vercel", "local"] = Field(
        default="vercel", description="Blob storage backend"
    )
    blob_read_write_token: SecretStr = Field(
        default=SecretStr(""), description="Vercel Blob read/write token"
    )
    blob_api_url: str = Field(
        default="https://blob.vercel-storage.com", description="Vercel Blob API base URL"
    )
    blob_api_version: str = Field(default="7", description="Vercel Blob API version header")
    blob_local_dir: Path = Field(
        default=Path("var/blob"), description="Directory for the local blob backend"
    )
    blob_local_base_url: str = Field(
        default="http://localhost:3000/blob",
        description="Public URL prefix for objects in the local blob backend",
    )
    blob_proxy_allowed_host: str = Field(
        default="blob.vercel-storage.com",
        description="Host suffix the blob proxy is allowed to fetch from",
    )
    blob_proxy_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout for blob proxy fetches"
    )
    blob_proxy_cache_seconds: int = Field(
        default=60 * 60 * 24 * 7, ge=0, description="Cache lifetime for proxied blobs"
    )
    project_images_cache_ttl: float = Field(
        default=300.0, ge=0, description="Project image mapping cache TTL (seconds)"
    )

    # Uploads
    upload_max_image_bytes: int = Field(
        default=10 * 1024 * 1024, gt=0, description="Maximum image upload size"
    )
    upload_max_video_bytes: int = Field(
        default=100 * 1024 * 1024, gt=0, description="Maximum video upload size"
    )
    hero_video_pathname: str = Field(
        default="video/builders-on-the-construction-2023-11-27-05-02-01-utc.mp4",
        description="Blob pathname of the homepage hero video",
    )

    # Content
    content_dir: Path = Field(
        default=Path("data"),
        description="Directory holding projects.json and case_studies.json",
    )

    # Rate limiting configuration
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable rate limiting on API endpoints",
    )
    rate_limit_default: str = Field(
        default="100/minute",
        description="Default rate limit for API endpoints (e.g., '100/minute', '1000/hour')",
    )
    rate_limit_storage: str = Field(
        default="memory://",
        description="Rate limit storage backend (memory://, redis://host:port)",
    )
    rate_limit_forms: str = Field(
        default="10/minute", description="Rate limit for lead form and upload submissions"
    )
    rate_limit_login: str = Field(default="5/minute", description="Rate limit for admin login")

    @model_validator(mode="after")
    def check_env_fallbacks(self) -> "Settings":
        """Fall back to the site's unprefixed env vars when prefixed ones are unset."""
        for field_name, env_name in _ENV_FALLBACKS.items():
            if not getattr(self, field_name):
                fallback = os.environ.get(env_name, "")
                if fallback:
                    object.__setattr__(self, field_name, fallback)

        for field_name, env_name in _SECRET_FALLBACKS.items():
            if not getattr(self, field_name).get_secret_value():
                fallback = os.environ.get(env_name, "")
                if fallback:
                    object.__setattr__(self, field_name, SecretStr(fallback))

        return self

    @model_validator(mode="after")
    def validate_security_settings(self) -> "Settings":
        """Reject weak session secrets and insecure cookies in production."""
        secret = self.session_secret.get_secret_value()
        if secret and len(secret) < MIN_SESSION_SECRET_LENGTH:
            raise ValueError(
                f"session_secret must be at least {MIN_SESSION_SECRET_LENGTH} characters long"
            )
        if self.environment == "production" and self.cookie_secure is False:
            raise ValueError(
                "CRITICAL: cookie_secure=False is forbidden in production environment."
            )
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def secure_cookies(self) -> bool:
        """Whether session cookies carry the Secure flag."""
        if self.cookie_secure is not None:
            return self.cookie_secure
        return self.environment == "production"

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_username and self.admin_password.get_secret_value())

    def site_url(self, path: str = "") -> str:
        """Absolute site URL for a path."""
        return self.public_url.rstrip("/") + path


# Global settings instance
settings = Settings()
