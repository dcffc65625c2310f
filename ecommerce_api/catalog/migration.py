"""Department normalization backfill.

Converts the free-text ``Product.department`` label into a reference to a
canonical ``Department`` row. The job runs in four phases:

1. discover the distinct legacy labels,
2. find-or-create one Department per trimmed, non-empty label,
3. assign ``department_id`` to products that lack one, in batches,
4. count assigned and unassigned products.

Every phase only touches rows that are not migrated yet, so the job can be
re-run after a partial failure. Each batch commits on its own; there is no
locking against concurrent writers.
"""

from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce_api.catalog.models import Department
from ecommerce_api.catalog.repository import DepartmentRepository, ProductRepository
from ecommerce_api.domain.exceptions import InvalidParameterError
from ecommerce_api.infrastructure.config import settings

logger = structlog.get_logger()


@dataclass
class MigrationResult:
    """Outcome of one migration run.

    Attributes:
        departments_created: Departments inserted by this run.
        departments_matched: Distinct labels resolved to a department.
        products_updated: Products that received a department_id.
        products_with_department_id: Products carrying a department_id afterwards.
        products_without_department_id: Labelled products still lacking one.
        total_departments: Department rows after the run.
        batches: Number of update batches processed.
    """

    departments_created: int
    departments_matched: int
    products_updated: int
    products_with_department_id: int
    products_without_department_id: int
    total_departments: int
    batches: int

    @property
    def complete(self) -> bool:
        """Whether every labelled product now references a department."""
        return self.products_without_department_id == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the response representation."""
        return {
            "departmentsCreated": self.departments_created,
            "departmentsMatched": self.departments_matched,
            "productsUpdated": self.products_updated,
            "productsWithDeptId": self.products_with_department_id,
            "productsWithoutDeptId": self.products_without_department_id,
            "totalDepartments": self.total_departments,
            "batches": self.batches,
            "complete": self.complete,
        }


class DepartmentMigration:
    """Backfills ``Product.department_id`` from the legacy label.

    Example usage:
        async with async_session_factory() as session:
            result = await DepartmentMigration(session).run()
            assert result.complete
    """

    def __init__(self, session: AsyncSession, batch_size: int | None = None) -> None:
        """Initialize migration.

        Args:
            session: Async SQLAlchemy session; committed after each phase and batch.
            batch_size: Products per update batch, defaults to settings.

        Raises:
            InvalidParameterError: If batch_size is not positive.
        """
        batch_size = settings.migration_batch_size if batch_size is None else batch_size
        if batch_size < 1:
            raise InvalidParameterError("batchSize")

        self.session = session
        self.batch_size = batch_size
        self.products = ProductRepository(session)
        self.departments = DepartmentRepository(session)

    async def run(self) -> MigrationResult:
        """Execute all phases and return the verification counts."""
        logger.info("Starting department migration", batch_size=self.batch_size)

        labels = await self.discover_labels()
        department_map, created = await self.ensure_departments(labels)
        await self.session.commit()

        updated, batches = await self.backfill(department_map)

        with_id = await self.products.count_with_department()
        without_id = await self.products.count_missing_department()
        total_departments = await self.departments.count()

        result = MigrationResult(
            departments_created=created,
            departments_matched=len(department_map),
            products_updated=updated,
            products_with_department_id=with_id,
            products_without_department_id=without_id,
            total_departments=total_departments,
            batches=batches,
        )

        for product in await self.products.sample_migrated():
            logger.debug(
                "Migrated product sample",
                product=product.name,
                legacy_department=product.department,
                department=product.department_info.name if product.department_info else None,
            )

        log = logger.info if result.complete else logger.warning
        log("Department migration finished", **result.to_dict())
        return result

    async def discover_labels(self) -> list[str]:
        """Distinct trimmed, non-empty legacy department labels."""
        raw_labels = await self.products.distinct_legacy_departments()

        labels: list[str] = []
        for raw in raw_labels:
            name = raw.strip()
            if not name:
                logger.warning("Skipping empty department name")
                continue
            if name not in labels:
                labels.append(name)

        logger.info("Discovered legacy departments", count=len(labels), departments=labels)
        return labels

    async def ensure_departments(self, labels: list[str]) -> tuple[dict[str, str], int]:
        """Find or create a Department for every label.

        Returns:
            Mapping of label to department id, and the number created.
        """
        department_map: dict[str, str] = {}
        created = 0

        for name in labels:
            department = await self.departments.get_by_name(name)
            if department is None:
                department = await self.departments.save(
                    Department(
                        name=name,
                        description=f"{name} department",
                        is_active=True,
                    )
                )
                created += 1
                logger.info("Created department", name=name, department_id=department.id)
            else:
                logger.debug("Department already exists", name=name, department_id=department.id)

            department_map[name] = department.id

        return department_map, created

    async def backfill(self, department_map: dict[str, str]) -> tuple[int, int]:
        """Assign department_id to unassigned products in fixed-size batches.

        Returns:
            Number of products updated and number of batches processed.
        """
        updated = 0
        batches = 0
        cursor: str | None = None

        while True:
            rows = await self.products.find_unassigned_batch(after=cursor, limit=self.batch_size)
            if not rows:
                break

            cursor = rows[-1][0]
            batches += 1

            by_department: dict[str, list[str]] = {}
            for object_id, label in rows:
                department_id = department_map.get(label.strip())
                if department_id is not None:
                    by_department.setdefault(department_id, []).append(object_id)

            batch_updated = 0
            for department_id, object_ids in by_department.items():
                batch_updated += await self.products.assign_department(object_ids, department_id)
            await self.session.commit()
            # Bulk updates bypass the identity map
            self.session.expire_all()

            updated += batch_updated
            logger.info(
                "Department backfill progress",
                batch=batches,
                batch_size=len(rows),
                batch_updated=batch_updated,
                updated=updated,
            )

            if len(rows) < self.batch_size:
                break

        return updated, batches
