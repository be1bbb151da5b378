"""Create order tables

Revision ID: 5b1e0c2d9a47
Revises:
Create Date: 2026-10-19

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5b1e0c2d9a47'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('email', sa.String(255)),
        sa.Column('created_at', sa.DateTime(timezone=True)),
    )
    op.create_table(
        'addresses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(120)),
        sa.Column('last_name', sa.String(120)),
        sa.Column('address1', sa.String(255)),
        sa.Column('city', sa.String(120)),
        sa.Column('zip_code', sa.String(32)),
        sa.Column('country_code', sa.String(2)),
    )
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), unique=True),
        sa.Column('primary_billing_address_id', sa.Integer(), sa.ForeignKey('addresses.id', ondelete='SET NULL')),
        sa.Column('primary_shipping_address_id', sa.Integer(), sa.ForeignKey('addresses.id', ondelete='SET NULL')),
    )
    op.create_table(
        'gateways',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(160), nullable=False),
        sa.Column('handle', sa.String(160), nullable=False, unique=True),
        sa.Column('is_frontend_enabled', sa.Boolean()),
    )
    op.create_table(
        'purchasables',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sku', sa.String(120), nullable=False, unique=True),
        sa.Column('description', sa.String(255)),
        sa.Column('price', sa.Numeric(14, 4)),
    )
    op.create_table(
        'order_statuses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(160), nullable=False),
        sa.Column('handle', sa.String(160), nullable=False, unique=True),
        sa.Column('color', sa.String(40)),
        sa.Column('is_default', sa.Boolean()),
        sa.Column('sort_order', sa.Integer()),
    )
    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('number', sa.String(32), nullable=False, unique=True),
        sa.Column('reference', sa.String(255)),
        sa.Column('coupon_code', sa.String(255)),
        sa.Column('order_status_id', sa.Integer(), sa.ForeignKey('order_statuses.id', ondelete='SET NULL')),
        sa.Column('email', sa.String(255)),
        sa.Column('is_completed', sa.Boolean()),
        sa.Column('date_ordered', sa.DateTime(timezone=True)),
        sa.Column('date_paid', sa.DateTime(timezone=True)),
        sa.Column('expiry_date', sa.DateTime(timezone=True)),
        sa.Column('currency', sa.String(3)),
        sa.Column('payment_currency', sa.String(3)),
        sa.Column('last_ip', sa.String(45)),
        sa.Column('order_language', sa.String(12)),
        sa.Column('message', sa.Text()),
        sa.Column('return_url', sa.String(255)),
        sa.Column('cancel_url', sa.String(255)),
        sa.Column('billing_address_id', sa.Integer(), sa.ForeignKey('addresses.id', ondelete='SET NULL')),
        sa.Column('shipping_address_id', sa.Integer(), sa.ForeignKey('addresses.id', ondelete='SET NULL')),
        sa.Column('shipping_method_handle', sa.String(255)),
        sa.Column('gateway_id', sa.Integer(), sa.ForeignKey('gateways.id', ondelete='SET NULL')),
        sa.Column('payment_source_id', sa.Integer()),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='SET NULL')),
        sa.Column('total_price', sa.Numeric(14, 4)),
        sa.Column('total_paid', sa.Numeric(14, 4)),
        sa.Column('date_created', sa.DateTime(timezone=True)),
        sa.Column('date_updated', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_orders_order_status_id', 'orders', ['order_status_id'], unique=False)
    op.create_index('ix_orders_email', 'orders', ['email'], unique=False)
    op.create_index('ix_orders_gateway_id', 'orders', ['gateway_id'], unique=False)
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'], unique=False)
    op.create_table(
        'line_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('purchasable_id', sa.Integer(), sa.ForeignKey('purchasables.id', ondelete='SET NULL')),
        sa.Column('description', sa.String(255)),
        sa.Column('qty', sa.Integer()),
        sa.Column('price', sa.Numeric(14, 4)),
        sa.Column('subtotal', sa.Numeric(14, 4)),
    )
    op.create_index('ix_line_items_order_id', 'line_items', ['order_id'], unique=False)
    op.create_index('ix_line_items_purchasable_id', 'line_items', ['purchasable_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_line_items_purchasable_id', table_name='line_items')
    op.drop_index('ix_line_items_order_id', table_name='line_items')
    op.drop_table('line_items')
    op.drop_index('ix_orders_customer_id', table_name='orders')
    op.drop_index('ix_orders_gateway_id', table_name='orders')
    op.drop_index('ix_orders_email', table_name='orders')
    op.drop_index('ix_orders_order_status_id', table_name='orders')
    op.drop_table('orders')
    op.drop_table('order_statuses')
    op.drop_table('purchasables')
    op.drop_table('gateways')
    op.drop_table('customers')
    op.drop_table('addresses')
    op.drop_table('users')
