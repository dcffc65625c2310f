"""Add departments table and products.department_id.

The legacy products.department label stays in place; run
``scripts/migrate_departments.py`` (or POST /api/admin/migrate-departments)
afterwards to backfill department_id.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create departments and the nullable product reference."""
    op.create_table(
        'departments',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.add_column(
        'products',
        sa.Column('department_id', sa.String(24), nullable=True),
    )
    op.create_foreign_key(
        'fk_products_department_id',
        'products',
        'departments',
        ['department_id'],
        ['id'],
    )
    op.create_index('ix_products_department_id', 'products', ['department_id'])
    op.create_index('ix_products_department_id_category', 'products', ['department_id', 'category'])


def downgrade() -> None:
    """Drop the product reference and departments."""
    op.drop_index('ix_products_department_id_category', table_name='products')
    op.drop_index('ix_products_department_id', table_name='products')
    op.drop_constraint('fk_products_department_id', 'products', type_='foreignkey')
    op.drop_column('products', 'department_id')
    op.drop_table('departments')
