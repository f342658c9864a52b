"""Admin authentication."""

from solidsteel.auth.dependencies import require_admin, resolve_admin_claims
from solidsteel.auth.session import (
    check_admin_credentials,
    clear_session_cookie,
    create_admin_token,
    set_session_cookie,
    verify_admin_token,
)

__all__ = [
    "check_admin_credentials",
    "clear_session_cookie",
    "create_admin_token",
    "require_admin",
    "resolve_admin_claims",
    "set_session_cookie",
    "verify_admin_token",
]
