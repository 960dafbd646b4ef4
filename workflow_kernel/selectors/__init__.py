"""Selectors for the workflow kernel (read side)."""

from workflow_kernel.selectors.audit_selector import AuditEntryDTO, AuditSelector
from workflow_kernel.selectors.document_selector import DocumentSelector

__all__ = [
    "AuditEntryDTO",
    "AuditSelector",
    "DocumentSelector",
]
