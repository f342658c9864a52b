"""Rate limiting for public endpoints.

Form and upload endpoints take submissions from anonymous visitors, so they
get a tighter limit than the default. Limits are read from settings at
request time.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from solidsteel import config as config_module
from solidsteel.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    storage_uri=settings.rate_limit_storage,
    enabled=settings.rate_limit_enabled,
)


def forms_limit() -> str:
    return config_module.settings.rate_limit_forms


def login_limit() -> str:
    return config_module.settings.rate_limit_login
