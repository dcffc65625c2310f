"""Product Catalog.

Provides product and department queries, aggregate statistics and the
department normalization backfill.
"""

from ecommerce_api.catalog.migration import DepartmentMigration, MigrationResult
from ecommerce_api.catalog.models import Department, Product
from ecommerce_api.catalog.repository import DepartmentRepository, ProductRepository
from ecommerce_api.catalog.service import (
    CatalogService,
    DepartmentDetail,
    DepartmentSummary,
    PaginatedResult,
    PaginationParams,
    ProductFilter,
)

__all__ = [
    # Models
    "Department",
    "Product",
    # Repository
    "DepartmentRepository",
    "ProductRepository",
    # Service
    "CatalogService",
    "DepartmentDetail",
    "DepartmentSummary",
    "PaginatedResult",
    "PaginationParams",
    "ProductFilter",
    # Migration
    "DepartmentMigration",
    "MigrationResult",
]
