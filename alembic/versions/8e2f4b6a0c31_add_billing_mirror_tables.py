"""add_billing_mirror_tables

Revision ID: 8e2f4b6a0c31
Revises: 5a1c9e3d7b20
Create Date: 2025-06-24 16:13:18.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '8e2f4b6a0c31'
down_revision: Union[str, Sequence[str], None] = '5a1c9e3d7b20'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SUBSCRIPTION_STATUSES = (
    'not_started', 'incomplete', 'incomplete_expired', 'trialing',
    'active', 'past_due', 'canceled', 'unpaid', 'paused',
)
ORDER_STATUSES = ('pending', 'completed', 'canceled')

subscription_status = postgresql.ENUM(*SUBSCRIPTION_STATUSES, name='stripe_subscription_status', create_type=False)
order_status = postgresql.ENUM(*ORDER_STATUSES, name='stripe_order_status', create_type=False)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema: 支付平台的客户/订阅/订单镜像表及按用户过滤的视图"""

    subscription_status.create(op.get_bind())
    order_status.create(op.get_bind())

    op.create_table(
        'stripe_customers',
        sa.Column('id', sa.BigInteger(), sa.Identity(always=True), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('customer_id', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_stripe_customers_user_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_stripe_customers'),
        sa.UniqueConstraint('user_id', name='uq_stripe_customers_user_id'),
        sa.UniqueConstraint('customer_id', name='uq_stripe_customers_customer_id'),
    )

    op.create_table(
        'stripe_subscriptions',
        sa.Column('id', sa.BigInteger(), sa.Identity(always=True), nullable=False),
        sa.Column('customer_id', sa.Text(), nullable=False),
        sa.Column('subscription_id', sa.Text(), nullable=True),
        sa.Column('price_id', sa.Text(), nullable=True),
        sa.Column('current_period_start', sa.BigInteger(), nullable=True),
        sa.Column('current_period_end', sa.BigInteger(), nullable=True),
        sa.Column('cancel_at_period_end', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('payment_method_brand', sa.String(length=50), nullable=True),
        sa.Column('payment_method_last4', sa.String(length=4), nullable=True),
        sa.Column('status', subscription_status, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_stripe_subscriptions'),
        sa.UniqueConstraint('customer_id', name='uq_stripe_subscriptions_customer_id'),
    )

    op.create_table(
        'stripe_orders',
        sa.Column('id', sa.BigInteger(), sa.Identity(always=True), nullable=False),
        sa.Column('checkout_session_id', sa.Text(), nullable=False),
        sa.Column('payment_intent_id', sa.Text(), nullable=False),
        sa.Column('customer_id', sa.Text(), nullable=False),
        sa.Column('amount_subtotal', sa.BigInteger(), nullable=False),
        sa.Column('amount_total', sa.BigInteger(), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=False),
        sa.Column('payment_status', sa.String(length=50), nullable=False),
        sa.Column('status', order_status, server_default='pending', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_stripe_orders'),
    )
    op.create_index('ix_stripe_orders_customer_id', 'stripe_orders', ['customer_id'])

    for table in ('stripe_customers', 'stripe_subscriptions', 'stripe_orders'):
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
        """)

    # 按当前用户过滤的只读视图（security_invoker使底层表的行级策略生效）
    op.execute("""
        CREATE VIEW stripe_user_subscriptions WITH (security_invoker = true) AS
        SELECT
            c.customer_id,
            s.subscription_id,
            s.status AS subscription_status,
            s.price_id,
            s.current_period_start,
            s.current_period_end,
            s.cancel_at_period_end,
            s.payment_method_brand,
            s.payment_method_last4
        FROM stripe_customers c
        LEFT JOIN stripe_subscriptions s ON c.customer_id = s.customer_id
        WHERE c.user_id = NULLIF(current_setting('app.current_user_id', true), '')::uuid
          AND c.deleted_at IS NULL
          AND s.deleted_at IS NULL
    """)
    op.execute("""
        CREATE VIEW stripe_user_orders WITH (security_invoker = true) AS
        SELECT
            c.customer_id,
            o.id AS order_id,
            o.checkout_session_id,
            o.payment_intent_id,
            o.amount_subtotal,
            o.amount_total,
            o.currency,
            o.payment_status,
            o.status AS order_status,
            o.created_at AS order_date
        FROM stripe_customers c
        LEFT JOIN stripe_orders o ON c.customer_id = o.customer_id
        WHERE c.user_id = NULLIF(current_setting('app.current_user_id', true), '')::uuid
          AND c.deleted_at IS NULL
          AND o.deleted_at IS NULL
    """)


def downgrade() -> None:
    """Downgrade schema: 删除计费镜像"""

    op.execute("DROP VIEW IF EXISTS stripe_user_orders")
    op.execute("DROP VIEW IF EXISTS stripe_user_subscriptions")

    op.drop_index('ix_stripe_orders_customer_id', table_name='stripe_orders')
    op.drop_table('stripe_orders')
    op.drop_table('stripe_subscriptions')
    op.drop_table('stripe_customers')

    order_status.drop(op.get_bind())
    subscription_status.drop(op.get_bind())
