"""Reference listing endpoints.

- GET /api/users - users (paginated, limit capped)
- GET /api/orders - orders (paginated, limit capped)
"""

from typing import Annotated

from fastapi import APIRouter, Query

from ecommerce_api.api.dependencies import PageQuery, SessionDep
from ecommerce_api.api.schemas import PaginationSchema, ReferenceListResponse
from ecommerce_api.catalog.service import PaginatedResult, PaginationParams
from ecommerce_api.infrastructure.config import settings
from ecommerce_api.reference import repository

router = APIRouter(prefix="/api", tags=["Reference"])

LimitQuery = Annotated[
    int,
    Query(description="Items per page, capped", json_schema_extra={"minimum": 1}),
]


async def _list(repo: repository.ReferenceRepository, page: int, limit: int) -> ReferenceListResponse:
    pagination = PaginationParams(page=page, limit=min(limit, settings.reference_max_page_size))
    pagination.validate(max_limit=settings.reference_max_page_size)

    total = await repo.count()
    items = []
    if not pagination.past_end(total):
        items = await repo.find_page(limit=pagination.limit, offset=pagination.offset)
    result = PaginatedResult(
        items=[repository.to_dict(item) for item in items],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
    )
    return ReferenceListResponse(data=result.items, pagination=PaginationSchema.from_result(result))


@router.get("/users", response_model=ReferenceListResponse)
async def list_users(
    session: SessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
) -> ReferenceListResponse:
    """List users."""
    return await _list(repository.users(session), page, limit)


@router.get("/orders", response_model=ReferenceListResponse)
async def list_orders(
    session: SessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
) -> ReferenceListResponse:
    """List orders."""
    return await _list(repository.orders(session), page, limit)
