"""create_canteen_tables

Revision ID: 20261019_canteen
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect
from fastapi_users_db_sqlalchemy.generics import GUID


# revision identifiers, used by Alembic.
revision: str = '20261019_canteen'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name):
    """Check if a table exists in the database"""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade():
    # 1. Users (fastapi-users columns + canteen profile)
    if not table_exists('users'):
        op.create_table(
            'users',
            sa.Column('id', GUID(), primary_key=True),
            sa.Column('email', sa.String(length=320), nullable=False),
            sa.Column('hashed_password', sa.String(length=1024), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('is_superuser', sa.Boolean(), nullable=False),
            sa.Column('is_verified', sa.Boolean(), nullable=False),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('role', sa.String(length=20), nullable=False),
            sa.Column('register_number', sa.String(length=50), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2. Menu
    if not table_exists('menu_items'):
        op.create_table(
            'menu_items',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('category', sa.String(length=50), nullable=False),
            sa.Column('price', sa.Integer(), nullable=False),
            sa.Column('available', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('description', sa.Text(), nullable=False, server_default=''),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.CheckConstraint('price >= 0', name='ck_menu_items_price_non_negative'),
        )
        op.create_index('ix_menu_items_category', 'menu_items', ['category'])

    # 3. Orders
    if not table_exists('orders'):
        op.create_table(
            'orders',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('user_id', GUID(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('customer_name', sa.String(length=100), nullable=False),
            sa.Column('token_number', sa.String(length=20), nullable=False),
            sa.Column('items', sa.JSON(), nullable=False),
            sa.Column('total', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
        )
        op.create_index('idx_orders_user', 'orders', ['user_id'])
        op.create_index('idx_orders_created_at', 'orders', ['created_at'])

    # 4. Bills (1:1 with orders)
    if not table_exists('bills'):
        op.create_table(
            'bills',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('bill_number', sa.String(length=20), nullable=False),
            sa.Column('order_id', sa.String(), sa.ForeignKey('orders.id'), nullable=False),
            sa.Column('user_id', GUID(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('customer_name', sa.String(length=100), nullable=False),
            sa.Column('register_number', sa.String(length=50), nullable=True),
            sa.Column('items', sa.JSON(), nullable=False),
            sa.Column('total', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('cancelled_at', sa.DateTime(), nullable=True),
            sa.Column('cancellation_reason', sa.Text(), nullable=True),
            sa.UniqueConstraint('bill_number', name='uq_bill_number'),
            sa.UniqueConstraint('order_id', name='uq_bill_order'),
        )
        op.create_index('idx_bills_user', 'bills', ['user_id'])


def downgrade():
    op.drop_index('idx_bills_user', table_name='bills')
    op.drop_table('bills')
    op.drop_index('idx_orders_created_at', table_name='orders')
    op.drop_index('idx_orders_user', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_menu_items_category', table_name='menu_items')
    op.drop_table('menu_items')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
