"""FastAPI routers and dependencies."""

from docgen.api.deps import get_app_settings, read_upload
from docgen.api.documents import router as documents_router
from docgen.api.templates import router as templates_router

__all__ = [
    "get_app_settings",
    "read_upload",
    "documents_router",
    "templates_router",
]
