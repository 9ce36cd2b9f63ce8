"""initial_storefront_schema

Revision ID: 4b7d2c9e1a03
Revises:
Create Date: 2026-10-18 09:00:12.481903

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7d2c9e1a03'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('affiliate_code', sa.String(), nullable=True),
        sa.Column('referred_by', sa.String(), nullable=True),
        sa.Column('balance', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('bank_name', sa.String(), nullable=True),
        sa.Column('bank_number', sa.String(), nullable=True),
        sa.Column('bank_holder', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)
    op.create_index('ix_profiles_affiliate_code', 'profiles', ['affiliate_code'], unique=True)
    op.create_index('ix_profiles_referred_by', 'profiles', ['referred_by'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('price', sa.BigInteger(), nullable=False),
        sa.Column('discount_price', sa.BigInteger(), nullable=True),
        sa.Column('cost_price', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('file_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_category', 'products', ['category'])

    op.create_table(
        'vouchers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('discount_type', sa.String(), nullable=False),
        sa.Column('discount_value', sa.BigInteger(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vouchers_id', 'vouchers', ['id'])
    op.create_index('ix_vouchers_code', 'vouchers', ['code'], unique=True)

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_code', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('guest_info', sa.JSON(), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('subtotal', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('discount_amount', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('voucher_code', sa.String(), nullable=True),
        sa.Column('total_amount', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('commission_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_method', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_order_code', 'orders', ['order_code'], unique=True)
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])

    op.create_table(
        'commission_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('source_buyer', sa.String(), nullable=True),
        sa.Column('products', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['affiliate_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id', name='uq_commission_logs_order'),
    )
    op.create_index('ix_commission_logs_affiliate_id', 'commission_logs', ['affiliate_id'])

    op.create_table(
        'payouts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(length=255), nullable=False, server_default='paid'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['affiliate_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payouts_affiliate_id', 'payouts', ['affiliate_id'])

    op.create_table(
        'settings',
        sa.Column('key', sa.String(), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('settings')
    op.drop_index('ix_payouts_affiliate_id', table_name='payouts')
    op.drop_table('payouts')
    op.drop_index('ix_commission_logs_affiliate_id', table_name='commission_logs')
    op.drop_table('commission_logs')
    op.drop_index('ix_orders_status', table_name='orders')
    op.drop_index('ix_orders_user_id', table_name='orders')
    op.drop_index('ix_orders_order_code', table_name='orders')
    op.drop_index('ix_orders_id', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_vouchers_code', table_name='vouchers')
    op.drop_index('ix_vouchers_id', table_name='vouchers')
    op.drop_table('vouchers')
    op.drop_index('ix_products_category', table_name='products')
    op.drop_index('ix_products_id', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_profiles_referred_by', table_name='profiles')
    op.drop_index('ix_profiles_affiliate_code', table_name='profiles')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_index('ix_profiles_id', table_name='profiles')
    op.drop_table('profiles')
