"""
SqlAuditRecorder -- appends workflow audit records to the audit log table.

Responsibility:
    Persists one ``AuditLogEntry`` per accepted transition, inside a
    SAVEPOINT so a failed append cannot undo the status change it
    describes.

Architecture position:
    Kernel > Services.  Implements the ``AuditRecorder`` protocol from
    ``domain/audit.py``.

Invariants enforced:
    - Append-only: the recorder only INSERTs.
    - Isolation: a failure rolls back the savepoint only; the caller's
      outer transaction stays usable.

Failure modes:
    - AuditWriteError wraps any database error raised by the append.
      Whether that error stops the transition is the caller's policy.
"""

from sqlalchemy.exc import SQLAlchemyError

from workflow_kernel.domain.audit import AuditRecord
from workflow_kernel.exceptions import AuditWriteError
from workflow_kernel.logging_config import get_logger
from workflow_kernel.models.audit_log import AuditLogEntry
from workflow_kernel.services.base import BaseService

logger = get_logger("services.audit")


class SqlAuditRecorder(BaseService):
    """Write ``AuditRecord``s to ``workflow_audit_log``."""

    def record(self, record: AuditRecord) -> None:
        try:
            with self.session.begin_nested():
                entry = AuditLogEntry.from_record(record)
                self.session.add(entry)
                self.session.flush()
        except SQLAlchemyError as exc:
            raise AuditWriteError(
                record.record_type, str(record.record_id), str(exc),
            ) from exc

        logger.info(
            "audit_recorded",
            extra={
                "audit_id": str(entry.id),
                "record_type": record.record_type,
                "record_id": str(record.record_id),
                "action": record.action.value,
                "status_from": record.status_from.value,
                "status_to": record.status_to.value,
            },
        )
