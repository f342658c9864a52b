"""sitemap.xml generation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from xml.etree import ElementTree as ET

from solidsteel.config import Settings
from solidsteel.content.case_studies import CaseStudyCatalog
from solidsteel.content.projects import ProjectCatalog
from solidsteel.content.services import ServiceCatalog
from solidsteel.content.store import ContentRepository

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

STATIC_ROUTES = (
    "",
    "/about",
    "/services",
    "/contact",
    "/projects",
    "/projects/gallery",
    "/quote-request",
    "/proforma-budget-consultation",
    "/privacy-policy",
    "/terms",
)


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    last_modified: date
    priority: float
    change_frequency: str = "monthly"


def build_sitemap_entries(
    repository: ContentRepository, settings: Settings, today: date | None = None
) -> list[SitemapEntry]:
    today = today or datetime.now(UTC).date()

    entries = [
        SitemapEntry(settings.site_url(route), today, 1.0 if route == "" else 0.8)
        for route in STATIC_ROUTES
    ]

    entries.append(SitemapEntry(settings.site_url("/case-studies"), today, 0.8))
    entries.extend(
        SitemapEntry(
            settings.site_url(f"/case-studies/{cs.slug}"), cs.last_updated.date(), 0.7
        )
        for cs in CaseStudyCatalog(repository).all()
    )

    entries.extend(
        SitemapEntry(settings.site_url(f"/projects/{p.slug}"), today, 0.7)
        for p in ProjectCatalog(repository).all()
    )

    entries.extend(
        SitemapEntry(settings.site_url(f"/services/{slug}"), today, 0.8)
        for slug in ServiceCatalog(repository).slugs()
    )
    return entries


def render_sitemap(entries: list[SitemapEntry]) -> str:
    """Serialize entries as a sitemaps.org ``urlset`` document."""
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = entry.url
        ET.SubElement(url, "lastmod").text = entry.last_modified.isoformat()
        ET.SubElement(url, "changefreq").text = entry.change_frequency
        ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'
