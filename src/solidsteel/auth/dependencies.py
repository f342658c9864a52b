"""FastAPI auth dependencies."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

from solidsteel import config as config_module
from solidsteel.auth.session import verify_admin_token
from solidsteel.errors import SessionError


def resolve_admin_claims(request: Request) -> dict[str, Any] | None:
    """Claims from the session cookie, or None when absent or invalid."""
    token = request.cookies.get(config_module.settings.session_cookie_name)
    if not token:
        return None
    try:
        return verify_admin_token(token)
    except SessionError:
        return None


async def require_admin(request: Request) -> dict[str, Any]:
    claims = resolve_admin_claims(request)
    if not claims:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return claims
