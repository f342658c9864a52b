"""Site content: projects, case studies and services."""

from solidsteel.content.admin import (
    create_record,
    delete_record,
    generate_slug,
    get_record,
    update_record,
)
from solidsteel.content.case_studies import CaseStudyCatalog
from solidsteel.content.projects import ProjectCatalog
from solidsteel.content.services import ServiceCatalog
from solidsteel.content.store import ContentRepository, JsonCollection, get_content_repository

__all__ = [
    "CaseStudyCatalog",
    "ContentRepository",
    "JsonCollection",
    "ProjectCatalog",
    "ServiceCatalog",
    "create_record",
    "delete_record",
    "generate_slug",
    "get_content_repository",
    "get_record",
    "update_record",
]
