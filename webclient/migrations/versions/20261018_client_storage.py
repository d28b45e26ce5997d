"""Client storage table

Revision ID: 20261018_client_storage
Revises:
Create Date: 2026-10-18

This migration adds:
1. client_storage_entries (client-only session domain and shell UI state,
   keyed by browser context id)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_client_storage'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # 1. CLIENT STORAGE ENTRIES TABLE
    # ==========================================================================
    op.create_table('client_storage_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('context_id', sa.String(length=64), nullable=False),
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('context_id', 'key', name='uq_client_storage_context_key'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('client_storage_entries', schema=None) as batch_op:
        batch_op.create_index('ix_client_storage_context_id', ['context_id'], unique=False)


def downgrade():
    with op.batch_alter_table('client_storage_entries', schema=None) as batch_op:
        batch_op.drop_index('ix_client_storage_context_id')

    op.drop_table('client_storage_entries')
