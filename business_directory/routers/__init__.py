"""API routers for the Business Directory service."""

from business_directory.routers.admin import router as admin_router
from business_directory.routers.businesses import router as businesses_router
from business_directory.routers.complaints import router as complaints_router
from business_directory.routers.reviews import router as reviews_router

__all__ = [
    "admin_router",
    "businesses_router",
    "complaints_router",
    "reviews_router",
]
