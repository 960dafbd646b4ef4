"""
Module: workflow_kernel.models.audit_log
Responsibility: ORM persistence for the workflow audit trail.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain value objects.

Invariants enforced:
    - Append-only: no UPDATE or DELETE (ORM listeners in db/immutability.py).
    - One row per accepted workflow transition.

Failure modes:
    - ImmutabilityViolationError on any UPDATE/DELETE attempt.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from workflow_kernel.db.base import Base, UUIDString
from workflow_kernel.domain.audit import AuditRecord
from workflow_kernel.domain.workflow import WorkflowAction, WorkflowStatus


class AuditLogEntry(Base):
    """
    One immutable audit row.

    Contract:
        Rows are written by SqlAuditRecorder and never touched again.
        ``old_values`` / ``new_values`` hold ``{"status": <canonical>}``.
    """

    __tablename__ = "workflow_audit_log"

    __table_args__ = (
        Index("idx_audit_entity", "entity_type", "entity_id"),
        Index("idx_audit_module", "module"),
        Index("idx_audit_occurred", "occurred_at"),
    )

    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Actor
    user_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    user_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    user_email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    user_role: Mapped[str] = mapped_column(String(50), nullable=False)

    # What happened, to what
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    module: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    entity_reference: Mapped[str] = mapped_column(String(50), nullable=False)

    old_values: Mapped[dict] = mapped_column(JSON, nullable=False)
    new_values: Mapped[dict] = mapped_column(JSON, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Provenance
    ip_address: Mapped[str] = mapped_column(String(64), nullable=False)
    user_agent: Mapped[str] = mapped_column(String(200), nullable=False)

    def __repr__(self) -> str:
        return f"<AuditLogEntry {self.action} on {self.entity_type}:{self.entity_reference}>"

    @classmethod
    def from_record(cls, record: AuditRecord) -> "AuditLogEntry":
        return cls(
            occurred_at=record.occurred_at,
            user_id=record.actor_id,
            user_name=record.actor_name,
            user_email=record.actor_email,
            user_role=record.actor_role,
            action=record.action.value,
            module=record.module,
            entity_type=record.record_type,
            entity_id=record.record_id,
            entity_reference=record.record_number,
            old_values={"status": record.status_from.value},
            new_values={"status": record.status_to.value},
            description=record.summary,
            comment=record.comment,
            ip_address=record.ip_address,
            user_agent=record.user_agent,
        )

    def to_record(self) -> AuditRecord:
        return AuditRecord(
            actor_id=self.user_id,
            actor_name=self.user_name,
            actor_email=self.user_email,
            actor_role=self.user_role,
            action=WorkflowAction(self.action),
            module=self.module,
            record_id=self.entity_id,
            record_type=self.entity_type,
            record_number=self.entity_reference,
            status_from=WorkflowStatus(self.old_values["status"]),
            status_to=WorkflowStatus(self.new_values["status"]),
            occurred_at=self.occurred_at,
            summary=self.description,
            comment=self.comment,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
        )
