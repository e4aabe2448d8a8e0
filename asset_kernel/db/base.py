"""
Module: asset_kernel.db.base
Responsibility: Declarative base for the registry's ORM models.  Fixes the
    column types every table shares (UUID keys as String(36), Decimal
    amounts as Numeric(38, 9)), the constraint naming convention, and the
    audit columns of ``TrackedBase``.
Architecture position: Kernel > DB.  ORM model files import from here; this
    module imports nothing from asset_modules or asset_ingestion.

Invariants enforced:
    - Every row has a uuid4 primary key.
    - Monetary columns are Numeric, never Float.  SQLite stores them as
      REAL-backed NUMERIC and SQLAlchemy returns Decimal.
    - Every tracked row records who created it; updates record who changed it.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, MetaData, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

# Deterministic constraint names keep SQLite and PostgreSQL schemas aligned.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class UUIDString(TypeDecorator):
    """UUID bound as its 36-character string form and read back as UUID."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """Declarative base: uuid4 ``id`` plus the shared type map."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        UUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Abstract base adding audit columns.

    ``created_at``/``updated_at`` are database timestamps;
    ``created_by_id`` is required, ``updated_by_id`` is set by
    ``apply_dto`` on edits.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(),
    )
    created_by_id: Mapped[UUID]
    updated_by_id: Mapped[UUID | None]
