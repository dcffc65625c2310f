#!/usr/bin/env python3
"""Department migration script.

Backfills products.department_id from the legacy department label,
creating one Department per distinct label. Safe to re-run.

Usage:
    python scripts/migrate_departments.py
    python scripts/migrate_departments.py --batch-size 500
    python scripts/migrate_departments.py --create-tables
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ecommerce_api.catalog.migration import DepartmentMigration, MigrationResult
from ecommerce_api.infrastructure.config import settings
from ecommerce_api.infrastructure.database import async_session_factory, create_tables, engine
from ecommerce_api.infrastructure.logging import configure_logging


async def migrate(batch_size: int) -> MigrationResult:
    """Run the migration in its own session.

    Args:
        batch_size: Products per update batch.

    Returns:
        Migration result.
    """
    async with async_session_factory() as session:
        return await DepartmentMigration(session, batch_size=batch_size).run()


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Normalize product departments into the departments table",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.migration_batch_size,
        help=f"Products per update batch (default: {settings.migration_batch_size})",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before migrating",
    )

    args = parser.parse_args()
    configure_logging(json_logs=False)

    print("=" * 60)
    print("Department Migration")
    print("=" * 60)
    print(f"Batch size: {args.batch_size}")
    print()

    try:
        if args.create_tables:
            print("Creating database tables...")
            await create_tables()
            print("Tables ready.")
            print()

        result = await migrate(args.batch_size)
    finally:
        await engine.dispose()

    print(f"  ✓ Departments created: {result.departments_created}")
    print(f"  ✓ Departments matched: {result.departments_matched}")
    print(f"  ✓ Products updated: {result.products_updated} in {result.batches} batches")
    print(f"  ✓ Products with department_id: {result.products_with_department_id}")
    print(f"  ✓ Total departments: {result.total_departments}")
    print()

    print("=" * 60)
    if result.complete:
        print("Migration complete!")
        print("=" * 60)
        return 0

    print(f"✗ {result.products_without_department_id} products still lack a department_id")
    print("=" * 60)
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
