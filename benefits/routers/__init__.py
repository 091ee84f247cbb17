"""FastAPI routers for the benefits cost service."""

from .eib import router as eib_router
from .reports import router as reports_router
from .soap import router as soap_router

__all__ = [
    "eib_router",
    "reports_router",
    "soap_router",
]
