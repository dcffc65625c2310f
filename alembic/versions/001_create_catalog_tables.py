"""Create products and reference tables.

Products carry the free-text department label only; the normalized
department relation arrives in revision 002.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create products, users, orders and loader tables."""
    op.create_table(
        'products',
        sa.Column('object_id', sa.String(24), primary_key=True),
        sa.Column('id', sa.String(64), nullable=False, unique=True, index=True),
        sa.Column('sku', sa.String(100), nullable=False, unique=True, index=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('category', sa.String(200), nullable=False, index=True),
        sa.Column('brand', sa.String(200), nullable=False, index=True),
        sa.Column('cost', sa.Float(), nullable=False),
        sa.Column('retail_price', sa.Float(), nullable=False),
        sa.Column('department', sa.String(100), nullable=True, index=True),
        sa.Column('distribution_center_id', sa.String(64), nullable=False, index=True),
        *_timestamps(),
        sa.CheckConstraint('cost >= 0', name='ck_products_cost_non_negative'),
        sa.CheckConstraint('retail_price >= 0', name='ck_products_retail_price_non_negative'),
    )
    op.create_index('ix_products_category_brand', 'products', ['category', 'brand'])
    op.create_index('ix_products_department_category', 'products', ['department', 'category'])

    op.create_table(
        'users',
        sa.Column('object_id', sa.String(24), primary_key=True),
        sa.Column('id', sa.String(64), nullable=False, unique=True, index=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('street_address', sa.String(255), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('traffic_source', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
    )
    op.create_index('ix_users_state_city', 'users', ['state', 'city'])

    op.create_table(
        'orders',
        sa.Column('object_id', sa.String(24), primary_key=True),
        sa.Column('order_id', sa.String(64), nullable=False, unique=True, index=True),
        sa.Column('user_id', sa.String(64), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='Processing', index=True),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
        sa.Column('returned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('shipped_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('num_of_item', sa.Integer(), nullable=False),
        sa.CheckConstraint('num_of_item >= 1', name='ck_orders_num_of_item_positive'),
    )
    op.create_index('ix_orders_user_created', 'orders', ['user_id', 'created_at'])
    op.create_index('ix_orders_status_created', 'orders', ['status', 'created_at'])

    op.create_table(
        'order_items',
        sa.Column('object_id', sa.String(24), primary_key=True),
        sa.Column('id', sa.String(64), nullable=True, index=True),
        sa.Column('order_id', sa.String(64), nullable=True, index=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('product_id', sa.String(64), nullable=True),
        sa.Column('inventory_item_id', sa.String(64), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('shipped_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('returned_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'inventory_items',
        sa.Column('object_id', sa.String(24), primary_key=True),
        sa.Column('id', sa.String(64), nullable=True, index=True),
        sa.Column('product_id', sa.String(64), nullable=True, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sold_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('product_category', sa.String(200), nullable=True),
        sa.Column('product_name', sa.String(500), nullable=True),
        sa.Column('product_brand', sa.String(200), nullable=True),
        sa.Column('product_retail_price', sa.Float(), nullable=True),
        sa.Column('product_department', sa.String(100), nullable=True),
        sa.Column('product_sku', sa.String(100), nullable=True),
        sa.Column('product_distribution_center_id', sa.String(64), nullable=True),
    )

    op.create_table(
        'distribution_centers',
        sa.Column('object_id', sa.String(24), primary_key=True),
        sa.Column('id', sa.String(64), nullable=True, index=True),
        sa.Column('name', sa.String(200), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
    )


def downgrade() -> None:
    """Drop all tables created by this revision."""
    op.drop_table('distribution_centers')
    op.drop_table('inventory_items')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('users')
    op.drop_table('products')
