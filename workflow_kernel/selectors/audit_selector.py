"""
Module: workflow_kernel.selectors.audit_selector
Responsibility: Read-only access to the workflow audit trail of one entity.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Read-only.
    - DTO convention: returns ``AuditEntryDTO``, never raw ORM rows, so
      callers cannot accidentally mutate an append-only entry.
    - History is ordered by ``occurred_at`` ascending (oldest first).
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select

from workflow_kernel.domain.audit import AuditRecord
from workflow_kernel.models.audit_log import AuditLogEntry
from workflow_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class AuditEntryDTO:
    """A stored audit row: its ID plus the record it holds."""

    id: UUID
    record: AuditRecord


class AuditSelector(BaseSelector):

    def history_for(self, record_type: str, record_id: UUID) -> list[AuditEntryDTO]:
        """All audit entries for one document, oldest first."""
        rows = self.session.execute(
            select(AuditLogEntry)
            .where(
                AuditLogEntry.entity_type == record_type.upper(),
                AuditLogEntry.entity_id == record_id,
            )
            .order_by(AuditLogEntry.occurred_at, AuditLogEntry.id)
        ).scalars().all()
        return [AuditEntryDTO(id=row.id, record=row.to_record()) for row in rows]

    def count_for(self, record_type: str, record_id: UUID) -> int:
        return len(self.history_for(record_type, record_id))
