"""
Module: workflow_kernel.models.document
Responsibility: ORM persistence for documents moving through the
    maker-checker-approver workflow (PJO, JO, BKK).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - ``status`` holds the document type's PERSISTED vocabulary
      (e.g. ``pending_approval`` for a PJO, ``active`` for an approved JO),
      never the canonical one.  Translation lives in domain/status_mapping.
    - ``status`` changes only through DocumentService.apply_transition,
      which performs a conditional UPDATE on the expected prior status.
    - ``document_number`` is unique per document type.

Audit relevance:
    The submitted/checked/approved/rejected stamp columns record who moved
    the document and when; the full history lives in workflow_audit_log.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from workflow_kernel.db.base import TrackedBase, UUIDString


class WorkflowDocument(TrackedBase):
    """
    A workflow-controlled document.

    Contract:
        One row per document.  ``document_type`` selects the transition
        table and the status vocabulary used in ``status``.

    Non-goals:
        - Business content (cost lines, amounts, customers) lives in the
          ERP's own tables; this row only carries workflow state.
    """

    __tablename__ = "workflow_documents"

    __table_args__ = (
        UniqueConstraint("document_type", "document_number", name="uq_document_number"),
        Index("idx_document_type_status", "document_type", "status"),
        Index("idx_document_created", "created_at"),
    )

    document_type: Mapped[str] = mapped_column(String(10), nullable=False)

    document_number: Mapped[str] = mapped_column(String(50), nullable=False)

    # Persisted (document-native) status string
    status: Mapped[str] = mapped_column(String(30), nullable=False)

    submitted_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    checked_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    checked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    approved_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    rejected_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<WorkflowDocument {self.document_type}:{self.document_number} [{self.status}]>"
