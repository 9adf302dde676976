"""create store_orders

Revision ID: 001_store_orders
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_store_orders'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'store_orders',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column('order_items', sa.JSON(), nullable=False),
        sa.Column('shipping_address', sa.JSON(), nullable=True),
        sa.Column('payment_method', sa.String(length=32), nullable=False),
        sa.Column('items_price', sa.Float(), nullable=False),
        sa.Column('tax_price', sa.Float(), nullable=False),
        sa.Column('shipping_price', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_delivered', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('razorpay_order_id', sa.String(length=128), nullable=True),
        sa.Column('razorpay_payment_id', sa.String(length=128), nullable=True),
        sa.Column('razorpay_signature', sa.String(length=256), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_store_orders_user_id', 'store_orders', ['user_id'])
    op.create_index('ix_store_orders_razorpay_order_id', 'store_orders', ['razorpay_order_id'])
    op.create_index('ix_store_orders_razorpay_payment_id', 'store_orders', ['razorpay_payment_id'])


def downgrade() -> None:
    op.drop_index('ix_store_orders_razorpay_payment_id', table_name='store_orders')
    op.drop_index('ix_store_orders_razorpay_order_id', table_name='store_orders')
    op.drop_index('ix_store_orders_user_id', table_name='store_orders')
    op.drop_table('store_orders')
