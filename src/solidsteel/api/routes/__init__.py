"""API route modules."""

from solidsteel.api.routes.admin import router as admin_router
from solidsteel.api.routes.admin_auth import router as admin_auth_router
from solidsteel.api.routes.blob import router as blob_router
from solidsteel.api.routes.content import router as content_router
from solidsteel.api.routes.forms import router as forms_router
from solidsteel.api.routes.monitoring import router as monitoring_router
from solidsteel.api.routes.seo import router as seo_router
from solidsteel.api.routes.uploads import router as uploads_router

__all__ = [
    "admin_auth_router",
    "admin_router",
    "blob_router",
    "content_router",
    "forms_router",
    "monitoring_router",
    "seo_router",
    "uploads_router",
]
