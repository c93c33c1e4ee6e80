"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - url_entries table: code to original URL mappings
    - counters table: named code sequences
    """
    bind = op.get_bind()
    inspector = inspect(bind)
    existing_tables = inspector.get_table_names()

    if 'url_entries' not in existing_tables:
        op.create_table(
            'url_entries',
            sa.Column('code', sa.Integer(), nullable=False, autoincrement=False),
            sa.Column('original_url', sa.Text(), nullable=False),
            sa.Column('visit_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('code')
        )

    if 'counters' not in existing_tables:
        op.create_table(
            'counters',
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('next_value', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('name')
        )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('counters')
    op.drop_table('url_entries')
