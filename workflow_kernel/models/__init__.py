"""ORM models for the workflow kernel."""

from workflow_kernel.models.audit_log import AuditLogEntry
from workflow_kernel.models.document import WorkflowDocument

__all__ = [
    "AuditLogEntry",
    "WorkflowDocument",
]
