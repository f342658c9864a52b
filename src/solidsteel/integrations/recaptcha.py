"""reCAPTCHA v3 token verification."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from solidsteel import config as config_module

log = structlog.get_logger()

_verifier: RecaptchaVerifier | None = None


@dataclass
class RecaptchaResult:
    success: bool
    score: float = 0.0


class RecaptchaVerifier:
    """Checks form tokens against the siteverify endpoint.

    A token passes only when the provider reports success and the score
    meets ``min_score``. Every failure mode returns a failed result.
    """

    def __init__(
        self,
        secret: str,
        *,
        verify_url: str = "https://www.google.com/recaptcha/api/siteverify",
        min_score: float = 0.5,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._secret = secret
        self._verify_url = verify_url
        self._min_score = min_score
        self._timeout = timeout
        self._transport = transport

    async def verify(self, token: str, remote_ip: str | None = None) -> RecaptchaResult:
        if not self._secret:
            log.error("recaptcha_not_configured")
            return RecaptchaResult(success=False)

        data = {"secret": self._secret, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._verify_url, data=data)
            body = response.json()
            if not isinstance(body, dict):
                raise ValueError("siteverify response is not a JSON object")
            score = float(body.get("score") or 0.0)
            success = bool(body.get("success")) and score >= self._min_score
        except (httpx.HTTPError, ValueError, TypeError) as e:
            log.error("recaptcha_request_failed", error=str(e))
            return RecaptchaResult(success=False)

        if not success:
            log.warning(
                "recaptcha_rejected",
                score=score,
                error_codes=body.get("error-codes", []),
            )
        return RecaptchaResult(success=success, score=score)


def get_recaptcha_verifier() -> RecaptchaVerifier:
    """Get or create the global verifier singleton."""
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        settings = config_module.settings
        _verifier = RecaptchaVerifier(
            settings.recaptcha_secret_key.get_secret_value(),
            verify_url=settings.recaptcha_verify_url,
            min_score=settings.recaptcha_min_score,
            timeout=settings.recaptcha_timeout_seconds,
        )
    return _verifier
