"""Tests for configuration security validation."""

import pytest

from solidsteel.config import Settings

LONG_SECRET = "x" * 40


class TestSessionSecretSecurity:
    """Tests for session secret validation."""

    def test_empty_secret_allowed(self) -> None:
        """An unset secret is allowed; admin login reports it at request time."""
        settings = Settings(session_secret="")
        assert settings.session_secret.get_secret_value() == ""

    def test_short_secret_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least 32 characters"):
            Settings(session_secret="too-short")

    def test_long_secret_accepted(self) -> None:
        settings = Settings(session_secret=LONG_SECRET)
        assert settings.session_secret.get_secret_value() == LONG_SECRET


class TestCookieSecurity:
    """Tests for cookie_secure handling."""

    def test_insecure_cookies_forbidden_in_production(self) -> None:
        with pytest.raises(ValueError, match="cookie_secure=False is forbidden in production"):
            Settings(environment="production", cookie_secure=False)

    def test_insecure_cookies_allowed_in_development(self) -> None:
        settings = Settings(environment="development", cookie_secure=False)
        assert settings.secure_cookies is False

    def test_secure_by_default_in_production_only(self) -> None:
        assert Settings(environment="production").secure_cookies is True
        assert Settings(environment="staging").secure_cookies is False
        assert Settings(environment="development").secure_cookies is False

    def test_explicit_secure_cookies_in_development(self) -> None:
        assert Settings(environment="development", cookie_secure=True).secure_cookies is True


class TestEnvironmentValidation:
    """Tests for environment field validation."""

    def test_valid_environments(self) -> None:
        for env in ["development", "staging", "production"]:
            settings = Settings(environment=env)  # type: ignore[arg-type]
            assert settings.environment == env

    def test_invalid_environment_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(environment="dev")  # type: ignore[arg-type]

        with pytest.raises(ValueError):
            Settings(environment="prod")  # type: ignore[arg-type]

    def test_default_environment_is_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SOLIDSTEEL_ENVIRONMENT", raising=False)
        settings = Settings()
        assert settings.environment == "development"
        assert settings.is_development is True


class TestEnvFallbacks:
    """The site's existing unprefixed variables still configure the service."""

    def test_webhook_url_falls_back_to_unprefixed_env(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("SOLIDSTEEL_CRM_WEBHOOK_QUOTE_URL", raising=False)
        monkeypatch.setenv("GROUNDHOGG_WEBHOOK_QUOTE_URL", "https://crm.test/quote")
        settings = Settings()
        assert settings.crm_webhook_quote_url == "https://crm.test/quote"

    def test_prefixed_env_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOLIDSTEEL_CRM_WEBHOOK_QUOTE_URL", "https://crm.test/prefixed")
        monkeypatch.setenv("GROUNDHOGG_WEBHOOK_QUOTE_URL", "https://crm.test/unprefixed")
        settings = Settings()
        assert settings.crm_webhook_quote_url == "https://crm.test/prefixed"

    def test_secret_falls_back_to_unprefixed_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SOLIDSTEEL_SESSION_SECRET", raising=False)
        monkeypatch.setenv("SECRET_COOKIE_PASSWORD", LONG_SECRET)
        settings = Settings()
        assert settings.session_secret.get_secret_value() == LONG_SECRET


class TestDerivedValues:
    def test_site_url_strips_trailing_slash(self) -> None:
        settings = Settings(public_url="https://solidsteelmgt.ca/")
        assert settings.site_url("/contact") == "https://solidsteelmgt.ca/contact"
        assert settings.site_url() == "https://solidsteelmgt.ca"

    def test_admin_configured_requires_both_credentials(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
        monkeypatch.delenv("SOLIDSTEEL_ADMIN_PASSWORD", raising=False)
        assert Settings(admin_username="admin", admin_password="").admin_configured is False
        assert Settings(admin_username="admin", admin_password="pw").admin_configured is True
