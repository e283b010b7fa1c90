"""enable_row_level_security

Revision ID: c47d1a9e5f62
Revises: 8e2f4b6a0c31
Create Date: 2025-06-25 23:25:35.000000

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = 'c47d1a9e5f62'
down_revision: Union[str, Sequence[str], None] = '8e2f4b6a0c31'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# 当前请求的用户ID，由应用在事务内通过 set_config 设置；未设置时为NULL，任何行都不匹配
CURRENT_USER = "NULLIF(current_setting('app.current_user_id', true), '')::uuid"

OWN_CUSTOMER_IDS = f"""
    customer_id IN (
        SELECT customer_id FROM stripe_customers
        WHERE user_id = {CURRENT_USER} AND deleted_at IS NULL
    )
"""

POLICIES = [
    # (表, 策略名, 命令, 子句)
    ('users', 'users_select_own', 'SELECT', f"USING (id = {CURRENT_USER})"),
    ('users', 'users_insert_own', 'INSERT', f"WITH CHECK (id = {CURRENT_USER})"),
    ('users', 'users_update_own', 'UPDATE', f"USING (id = {CURRENT_USER})"),
    ('form_submissions', 'form_submissions_select_own', 'SELECT', f"USING (user_id = {CURRENT_USER})"),
    ('form_submissions', 'form_submissions_insert_own', 'INSERT', f"WITH CHECK (user_id = {CURRENT_USER})"),
    ('form_submissions', 'form_submissions_update_own', 'UPDATE', f"USING (user_id = {CURRENT_USER})"),
    ('stripe_customers', 'stripe_customers_select_own', 'SELECT',
     f"USING (user_id = {CURRENT_USER} AND deleted_at IS NULL)"),
    ('stripe_subscriptions', 'stripe_subscriptions_select_own', 'SELECT',
     f"USING ({OWN_CUSTOMER_IDS} AND deleted_at IS NULL)"),
    ('stripe_orders', 'stripe_orders_select_own', 'SELECT',
     f"USING ({OWN_CUSTOMER_IDS} AND deleted_at IS NULL)"),
]

TABLES = ('users', 'form_submissions', 'stripe_customers', 'stripe_subscriptions', 'stripe_orders')


def upgrade() -> None:
    """Upgrade schema: 严格的行归属策略（无邮箱匹配、无跨用户读取）"""

    for table in TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")

    for table, name, command, clause in POLICIES:
        op.execute(f"CREATE POLICY {name} ON {table} FOR {command} {clause}")


def downgrade() -> None:
    """Downgrade schema: 移除行级安全策略"""

    for table, name, _, _ in POLICIES:
        op.execute(f"DROP POLICY IF EXISTS {name} ON {table}")

    for table in TABLES:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
