"""Create integration_event_log table.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create integration_event_log table."""
    op.create_table(
        'integration_event_log',
        sa.Column('event_id', sa.String(36), primary_key=True),
        sa.Column('event_type_name', sa.String(200), nullable=False, index=True),
        sa.Column('content', postgresql.JSONB, nullable=False),
        sa.Column('state', sa.String(20), nullable=False, server_default='not_published', index=True),
        sa.Column('times_sent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('creation_time', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('transaction_id', sa.String(36), nullable=True, index=True),
        sa.Column('last_sent_time', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    """Drop integration_event_log table."""
    op.drop_table('integration_event_log')
