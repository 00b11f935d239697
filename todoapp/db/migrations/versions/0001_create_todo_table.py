"""create_todo_table

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from todoapp.config import get_settings


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = get_settings().DB_SCHEMA


def upgrade() -> None:
    op.create_table(
        'todo',
        sa.Column('id', sa.Integer(), sa.Identity(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False, comment='内容（已去除首尾空白）'),
        sa.Column('done', sa.Boolean(), server_default=sa.false(), nullable=False, comment='是否完成'),
        sa.Column('index', sa.Integer(), nullable=False, comment='从 0 开始的位置'),
        sa.PrimaryKeyConstraint('id'),
        schema=SCHEMA,
    )


def downgrade() -> None:
    op.drop_table('todo', schema=SCHEMA)
