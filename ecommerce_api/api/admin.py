"""Admin API endpoints.

- POST /api/admin/migrate-departments - run the department backfill
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Query

from ecommerce_api.api.dependencies import SessionDep
from ecommerce_api.api.schemas import ErrorResponse, MigrationResponse
from ecommerce_api.catalog.migration import DepartmentMigration

router = APIRouter(prefix="/api/admin", tags=["Admin"])

logger = structlog.get_logger()


@router.post(
    "/migrate-departments",
    response_model=MigrationResponse,
    responses={400: {"model": ErrorResponse}},
)
async def migrate_departments(
    session: SessionDep,
    batch_size: Annotated[int | None, Query(alias="batchSize")] = None,
) -> MigrationResponse:
    """Backfill product department references from legacy labels.

    Safe to call repeatedly; already migrated products are skipped.
    """
    result = await DepartmentMigration(session, batch_size=batch_size).run()

    if result.complete:
        message = "Department migration completed successfully"
    else:
        message = (
            f"Department migration incomplete: {result.products_without_department_id} "
            "products still lack a department_id"
        )

    return MigrationResponse(message=message, results=result.to_dict())
