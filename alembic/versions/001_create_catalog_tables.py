"""Create catalog_brands, catalog_types and catalog_items tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from pgvector.sqlalchemy import Vector

from catalog_api.infrastructure.config import settings

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Must match the column type in catalog_api.catalog.models; changing the
# setting after this revision has run needs a new migration.
EMBEDDING_DIMENSIONS = settings.embedding_dimensions


def upgrade() -> None:
    """Create catalog tables and enable the vector extension."""
    op.execute('CREATE EXTENSION IF NOT EXISTS vector')

    op.create_table(
        'catalog_brands',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('brand', sa.String(100), nullable=False),
    )

    op.create_table(
        'catalog_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('type', sa.String(100), nullable=False),
    )

    op.create_table(
        'catalog_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(50), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(18, 2), nullable=False),
        sa.Column('picture_file_name', sa.String(200), nullable=True),
        sa.Column('catalog_type_id', sa.Integer(),
                  sa.ForeignKey('catalog_types.id'), nullable=False, index=True),
        sa.Column('catalog_brand_id', sa.Integer(),
                  sa.ForeignKey('catalog_brands.id'), nullable=False, index=True),
        sa.Column('available_stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('restock_threshold', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_stock_threshold', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('embedding', Vector(EMBEDDING_DIMENSIONS), nullable=True),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('catalog_items')
    op.drop_table('catalog_types')
    op.drop_table('catalog_brands')
