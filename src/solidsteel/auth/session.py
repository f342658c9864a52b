"""Admin session tokens.

The admin session is a signed JWT carried in an httpOnly cookie.
"""

from __future__ import annotations

import hmac
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from fastapi import Response

from solidsteel import config as config_module
from solidsteel.errors import SessionError

ADMIN_TOKEN_TYPE = "admin"


def _require_secret() -> str:
    secret = config_module.settings.session_secret.get_secret_value()
    if not secret:
        raise SessionError("Session secret is not configured (set SECRET_COOKIE_PASSWORD)")
    return secret


def check_admin_credentials(username: str, password: str) -> bool:
    """Constant-time comparison against the configured admin credentials."""
    settings = config_module.settings
    user_ok = hmac.compare_digest(username.encode(), settings.admin_username.encode())
    password_ok = hmac.compare_digest(
        password.encode(), settings.admin_password.get_secret_value().encode()
    )
    return user_ok and password_ok


def create_admin_token(username: str, *, expires_in: timedelta | None = None) -> str:
    """Create a signed admin session token.

    Token schema:
    - sub: admin username
    - typ: "admin"
    - iat/exp: unix timestamps
    """
    secret = _require_secret()
    settings = config_module.settings
    now = datetime.now(UTC)
    ttl = expires_in or timedelta(hours=settings.session_ttl_hours)

    payload: dict[str, Any] = {
        "sub": username,
        "typ": ADMIN_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    try:
        return jwt.encode(payload, secret, algorithm=settings.session_algorithm)
    except Exception as e:
        raise SessionError(f"Failed to sign session token: {e}") from e


def verify_admin_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry and token type; return the claims."""
    secret = _require_secret()
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[config_module.settings.session_algorithm],
            options={"require": ["sub", "iat", "exp"]},
        )
    except jwt.PyJWTError as e:
        raise SessionError(str(e)) from e

    if claims.get("typ") != ADMIN_TOKEN_TYPE:
        raise SessionError("Invalid token type")
    return claims


def set_session_cookie(response: Response, token: str) -> None:
    settings = config_module.settings
    response.set_cookie(
        settings.session_cookie_name,
        token,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
        max_age=int(timedelta(hours=settings.session_ttl_hours).total_seconds()),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(config_module.settings.session_cookie_name, path="/")
