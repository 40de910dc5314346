"""create_order_settlement_tables

Revision ID: 5c1e2a7b9d41
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c1e2a7b9d41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(precision=15, scale=2)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='Created at'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='Updated at'),
    ]


def upgrade() -> None:
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, comment='Product name'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', MONEY, nullable=False, comment='Current unit price'),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0', comment='Units available for sale'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    op.create_table(
        'cart_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False, comment='Cart owner'),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='Created at'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_cart_items_user_product'),
        sa.CheckConstraint('quantity > 0', name='ck_cart_items_quantity_positive'),
    )
    op.create_index('ix_cart_items_id', 'cart_items', ['id'])
    op.create_index('ix_cart_items_user_id', 'cart_items', ['user_id'])
    op.create_index('ix_cart_items_product_id', 'cart_items', ['product_id'])

    op.create_table(
        'wallets',
        sa.Column('user_id', sa.Integer(), autoincrement=False, nullable=False, comment='Wallet owner'),
        sa.Column('balance', MONEY, nullable=False, server_default='0', comment='Points balance'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='Updated at'),
        sa.PrimaryKeyConstraint('user_id'),
        sa.CheckConstraint('balance >= 0', name='ck_wallets_balance_non_negative'),
    )

    op.create_table(
        'coupons',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False, comment='Coupon code'),
        sa.Column('discount_type', sa.String(length=20), nullable=False, comment='PERCENTAGE/FIXED'),
        sa.Column('discount_value', MONEY, nullable=False),
        sa.Column('min_purchase', MONEY, nullable=True, comment='Minimum subtotal'),
        sa.Column('max_discount', MONEY, nullable=True, comment='Cap for PERCENTAGE coupons'),
        sa.Column('valid_from', sa.DateTime(timezone=True), nullable=False),
        sa.Column('valid_to', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_usage_limit', sa.Integer(), nullable=True, comment='NULL means unlimited'),
        sa.Column('current_usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('usage_limit_per_user', sa.Integer(), nullable=True, comment='NULL means unlimited'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('current_usage_count >= 0', name='ck_coupons_usage_non_negative'),
        sa.CheckConstraint("discount_type IN ('PERCENTAGE', 'FIXED')", name='ck_coupons_discount_type'),
    )
    op.create_index('ix_coupons_id', 'coupons', ['id'])
    op.create_index('ix_coupons_code', 'coupons', ['code'], unique=True)

    op.create_table(
        'user_coupons',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('coupon_id', sa.Integer(), nullable=False),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['coupon_id'], ['coupons.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'coupon_id', name='uq_user_coupons_user_coupon'),
        sa.CheckConstraint('usage_count >= 0', name='ck_user_coupons_usage_non_negative'),
    )
    op.create_index('ix_user_coupons_id', 'user_coupons', ['id'])
    op.create_index('ix_user_coupons_user_id', 'user_coupons', ['user_id'])
    op.create_index('ix_user_coupons_coupon_id', 'user_coupons', ['coupon_id'])

    op.create_table(
        'orders',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Order UUID'),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('total_amount', MONEY, nullable=False, comment='Subtotal'),
        sa.Column('coupon_discount', MONEY, nullable=False, server_default='0'),
        sa.Column('wallet_points_used', MONEY, nullable=False, server_default='0'),
        sa.Column('final_amount', MONEY, nullable=False, comment='Amount to pay'),
        sa.Column('coupon_id', sa.Integer(), nullable=True),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='PENDING', comment='PENDING/SUCCESS/FAILED/REFUNDED'),
        sa.Column('order_status', sa.String(length=20), nullable=False, server_default='PENDING', comment='PENDING/CONFIRMED/PROCESSING/SHIPPED/DELIVERED/CANCELLED'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['coupon_id'], ['coupons.id']),
        sa.CheckConstraint('total_amount >= 0', name='ck_orders_total_non_negative'),
        sa.CheckConstraint('coupon_discount >= 0', name='ck_orders_discount_non_negative'),
        sa.CheckConstraint('wallet_points_used >= 0', name='ck_orders_wallet_non_negative'),
        sa.CheckConstraint('final_amount >= 0', name='ck_orders_final_non_negative'),
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_orders_payment_status', 'orders', ['payment_status'])
    op.create_index('ix_orders_order_status', 'orders', ['order_status'])
    op.create_index('ix_orders_user_created', 'orders', ['user_id', 'created_at'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('product_name', sa.String(length=255), nullable=True, comment='Name at order time'),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', MONEY, nullable=False, comment='Price at order time'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.CheckConstraint('quantity > 0', name='ck_order_items_quantity_positive'),
    )
    op.create_index('ix_order_items_id', 'order_items', ['id'])
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    op.create_table(
        'payment_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.String(length=36), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='PENDING'),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('transaction_id', sa.String(length=100), nullable=True, comment='Gateway reference'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_payment_transactions_id', 'payment_transactions', ['id'])
    op.create_index('ix_payment_transactions_order_id', 'payment_transactions', ['order_id'], unique=True)
    op.create_index('ix_payment_transactions_transaction_id', 'payment_transactions', ['transaction_id'])


def downgrade() -> None:
    op.drop_table('payment_transactions')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('user_coupons')
    op.drop_table('coupons')
    op.drop_table('wallets')
    op.drop_table('cart_items')
    op.drop_table('products')
