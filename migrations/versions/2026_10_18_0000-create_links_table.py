"""Create links table

Revision ID: 001_links
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_links'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the links table with its lookup indexes:
    - short_code: unique, redirect lookups
    - url_hash: unique SHA-256 of original_url, shorten dedup
    - created_at: newest-first listings
    """
    bind = op.get_bind()
    if 'links' in inspect(bind).get_table_names():
        # Created by the application's startup check on an earlier boot
        return

    op.create_table(
        'links',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('title', sa.String(length=255), nullable=False, server_default='Untitled'),
        sa.Column('original_url', sa.Text(), nullable=False),
        sa.Column('url_hash', sa.String(length=64), nullable=False),
        sa.Column('short_code', sa.String(length=20), nullable=False),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_clicked', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('ix_links_short_code', 'links', ['short_code'], unique=True)
    op.create_index('ix_links_url_hash', 'links', ['url_hash'], unique=True)
    op.create_index('ix_links_created_at', 'links', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_links_created_at', table_name='links')
    op.drop_index('ix_links_url_hash', table_name='links')
    op.drop_index('ix_links_short_code', table_name='links')
    op.drop_table('links')
