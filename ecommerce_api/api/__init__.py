"""API layer module.

Contains FastAPI routers, response schemas and the request pipeline.
"""

from ecommerce_api.api.admin import router as admin_router
from ecommerce_api.api.departments import router as departments_router
from ecommerce_api.api.health import router as health_router
from ecommerce_api.api.products import router as products_router
from ecommerce_api.api.reference import router as reference_router

__all__ = [
    "admin_router",
    "departments_router",
    "health_router",
    "products_router",
    "reference_router",
]
