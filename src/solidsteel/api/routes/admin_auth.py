"""Admin login, logout and session status."""

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from solidsteel import config as config_module
from solidsteel.api.rate_limit import limiter, login_limit
from solidsteel.api.schemas import LoginRequest, SessionStatus
from solidsteel.auth.dependencies import resolve_admin_claims
from solidsteel.auth.session import (
    check_admin_credentials,
    clear_session_cookie,
    create_admin_token,
    set_session_cookie,
)
from solidsteel.errors import SessionError

log = structlog.get_logger()

router = APIRouter(prefix="/api/admin/auth", tags=["admin"])


@router.post("/login", response_model=None)
@limiter.limit(login_limit)
async def login(request: Request) -> JSONResponse:
    settings = config_module.settings
    if not settings.admin_configured:
        log.error("admin_login_unavailable", reason="credentials_not_configured")
        return JSONResponse(
            {"error": "Admin credentials not configured"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    try:
        body = LoginRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        body = LoginRequest()

    if not check_admin_credentials(body.username, body.password):
        log.warning("admin_login_failed", client=request.client.host if request.client else None)
        return JSONResponse(
            {"error": "Invalid username or password"}, status_code=status.HTTP_401_UNAUTHORIZED
        )

    try:
        token = create_admin_token(body.username)
    except SessionError as e:
        log.error("admin_session_unavailable", error=e.message)
        return JSONResponse(
            {"error": "Admin session is not configured"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response = JSONResponse({"success": True})
    set_session_cookie(response, token)
    log.info("admin_logged_in", username=body.username)
    return response


@router.post("/logout", response_model=None)
async def logout() -> JSONResponse:
    response = JSONResponse({"success": True})
    clear_session_cookie(response)
    return response


@router.get("/session")
async def session_status(request: Request) -> SessionStatus:
    return SessionStatus(is_logged_in=resolve_admin_claims(request) is not None)
