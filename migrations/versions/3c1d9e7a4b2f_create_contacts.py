"""create contacts

Revision ID: 3c1d9e7a4b2f
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c1d9e7a4b2f'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('legacy_id', sa.String(length=32), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('zip', sa.String(length=10), nullable=False),
        sa.Column('preferred_date', sa.Date(), nullable=False),
        sa.Column('preferred_time', sa.String(length=50), nullable=False),
        sa.Column('items', sa.Text(), nullable=False),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column(
            'images',
            sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'),
            nullable=False,
        ),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('new', 'contacted', 'completed')",
            name='contacts_status_check',
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('legacy_id'),
    )
    op.create_index('idx_contacts_status', 'contacts', ['status'])
    op.create_index('idx_contacts_timestamp', 'contacts', [sa.text('timestamp DESC')])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_contacts_timestamp', table_name='contacts')
    op.drop_index('idx_contacts_status', table_name='contacts')
    op.drop_table('contacts')
