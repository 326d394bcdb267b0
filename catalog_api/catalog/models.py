"""SQLAlchemy models for the catalog.

Defines CatalogItem, CatalogBrand and CatalogType tables for persistent storage.
"""

from decimal import Decimal

from pgvector.sqlalchemy import Vector
from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.database import Base


class CatalogBrand(Base):
    """Brand lookup entity."""

    __tablename__ = "catalog_brands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    brand: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<CatalogBrand(id={self.id}, brand={self.brand})>"


class CatalogType(Base):
    """Item type lookup entity."""

    __tablename__ = "catalog_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<CatalogType(id={self.id}, type={self.type})>"


class CatalogItem(Base):
    """Item available in the catalog.

    Attributes:
        id: Integer identity assigned by the store.
        name: Item name, used for prefix search and default ordering.
        description: Free text description.
        price: Unit price.
        picture_file_name: File name of the item picture under ``Pics/``.
        catalog_type_id: Foreign key to CatalogType.
        catalog_brand_id: Foreign key to CatalogBrand.
        available_stock: Quantity in stock.
        restock_threshold: Stock level below which to reorder.
        max_stock_threshold: Maximum units that can be held in stock.
        embedding: Semantic embedding of name and description, if computed.
    """

    __tablename__ = "catalog_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    picture_file_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    catalog_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("catalog_types.id"),
        nullable=False,
        index=True,
    )
    catalog_brand_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("catalog_brands.id"),
        nullable=False,
        index=True,
    )
    available_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    restock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_stock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    embedding: Mapped[list[float] | None] = mapped_column(
        Vector(settings.embedding_dimensions),
        nullable=True,
    )

    # Relationships
    catalog_type: Mapped["CatalogType"] = relationship("CatalogType", lazy="selectin")
    catalog_brand: Mapped["CatalogBrand"] = relationship("CatalogBrand", lazy="selectin")

    def __repr__(self) -> str:
        """String representation."""
        return f"<CatalogItem(id={self.id}, name={self.name})>"
