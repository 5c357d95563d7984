"""Config entries table

Revision ID: 0001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('config_entries',
        sa.Column('pk', sa.String(length=128), nullable=False),
        sa.Column('sk', sa.String(length=512), nullable=False),
        sa.Column('app', sa.String(length=32), nullable=False),
        sa.Column('screen', sa.String(length=128), nullable=False),
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('updated_at', sa.String(length=40), nullable=False),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('pk', 'sk')
    )
    op.create_index(op.f('ix_config_entries_status'), 'config_entries', ['status'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_config_entries_status'), table_name='config_entries')
    op.drop_table('config_entries')
