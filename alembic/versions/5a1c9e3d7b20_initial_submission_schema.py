"""initial_submission_schema

Revision ID: 5a1c9e3d7b20
Revises:
Create Date: 2025-06-21 00:15:22.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5a1c9e3d7b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

submission_status = postgresql.ENUM(
    'pending', 'in_progress', 'completed', 'cancelled',
    name='submission_status',
    create_type=False,
)


def upgrade() -> None:
    """Upgrade schema: 用户镜像表、提交表及updated_at触发器"""

    # 1. 枚举类型
    op.execute("CREATE TYPE submission_status AS ENUM ('pending', 'in_progress', 'completed', 'cancelled')")

    # 2. 用户镜像表
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 3. 提交表
    op.create_table(
        'form_submissions',
        sa.Column('id', sa.Uuid(), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('book_topic', sa.Text(), nullable=False),
        sa.Column('book_style', sa.Text(), server_default='', nullable=False),
        sa.Column('book_description', sa.Text(), nullable=False),
        sa.Column('additional_notes', sa.Text(), server_default='', nullable=False),
        sa.Column('status', submission_status, server_default='pending', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_form_submissions_user_id_users',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_form_submissions'),
    )
    op.create_index('ix_form_submissions_user_id', 'form_submissions', ['user_id'])
    op.create_index('ix_form_submissions_status', 'form_submissions', ['status'])
    op.create_index('ix_form_submissions_created_at', 'form_submissions', [sa.text('created_at DESC')])

    # 4. updated_at 触发器
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS trigger AS $$
        BEGIN
          NEW.updated_at = now();
          RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)
    for table in ('users', 'form_submissions'):
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
        """)


def downgrade() -> None:
    """Downgrade schema: 删除提交相关表"""

    for table in ('form_submissions', 'users'):
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")

    op.drop_index('ix_form_submissions_created_at', table_name='form_submissions')
    op.drop_index('ix_form_submissions_status', table_name='form_submissions')
    op.drop_index('ix_form_submissions_user_id', table_name='form_submissions')
    op.drop_table('form_submissions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    op.execute("DROP TYPE submission_status")
    # 函数由计费表迁移共用，最后删除
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")
