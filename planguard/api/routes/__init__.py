"""API route modules"""
from planguard.api.routes.plans import router as plans_router
from planguard.api.routes.support import router as support_router
from planguard.api.routes.credits import router as credits_router
from planguard.api.routes.invoices import router as invoices_router
from planguard.api.routes.dashboard import router as dashboard_router

__all__ = [
    "plans_router", "support_router", "credits_router", "invoices_router", "dashboard_router",
]
