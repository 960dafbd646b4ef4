"""
Module: workflow_kernel.db.base
Responsibility: Declarative bases for the workflow ORM models -- the UUID
    column type, the UUID primary key, and the created/updated tracking
    columns every mutable document carries.
Architecture position: Kernel > DB.  Lowest-level import target in the
    kernel; MUST NOT import from models/, services/, selectors/, domain/,
    or outer layers.

Invariants enforced:
    - Primary keys are uuid4 values, stored as String(36) so the same
      schema runs on PostgreSQL and SQLite.
    - Timestamps are timezone-aware.  Services stamp them from the injected
      Clock; the server default only covers rows written outside a service.
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID bound as ``str`` and loaded back as ``uuid.UUID``."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else PyUUID(value)


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Abstract base for rows that change after insert.

    Guarantees:
        - created_by_id is required; updated_by_id is set by the first
          transition.
        - updated_at moves on every UPDATE issued through the ORM or a
          service-level ``update()``.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(),
    )
    created_by_id: Mapped[PyUUID] = mapped_column(UUIDString())
    updated_by_id: Mapped[PyUUID | None] = mapped_column(UUIDString())
