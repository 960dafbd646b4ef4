"""Services for the workflow kernel (write side)."""

from workflow_kernel.services.audit_recorder import SqlAuditRecorder
from workflow_kernel.services.document_number_service import DocumentNumberService
from workflow_kernel.services.document_service import DocumentService
from workflow_kernel.services.sequence_service import SequenceCounter, SequenceService

__all__ = [
    "DocumentNumberService",
    "DocumentService",
    "SequenceCounter",
    "SequenceService",
    "SqlAuditRecorder",
]
