"""Search engine endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from solidsteel import config as config_module
from solidsteel.content.sitemap import build_sitemap_entries, render_sitemap
from solidsteel.content.store import ContentRepository, get_content_repository

router = APIRouter(tags=["seo"])


@router.get("/sitemap.xml", response_class=Response)
async def sitemap(repository: ContentRepository = Depends(get_content_repository)) -> Response:
    entries = build_sitemap_entries(repository, config_module.settings)
    return Response(content=render_sitemap(entries), media_type="application/xml")
