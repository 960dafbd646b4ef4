"""
Status mapping (``workflow_kernel.domain.status_mapping``).

Responsibility
--------------
Translates between the five canonical ``WorkflowStatus`` values and the
status strings each document table persists.  The persisted vocabularies
evolved separately per table (a PJO waiting for a check is stored as
``pending_approval``; an approved JO is stored as ``active``).

Architecture position
---------------------
**Kernel domain layer** -- pure lookup tables.  The only side effect is a
WARNING log line when an unrecognized string is defaulted.

Invariants enforced
-------------------
* Every canonical status maps to exactly one persisted string per type.
* ``to_canonical(from_canonical(s, dt)) == s`` for every canonical ``s``.
* ``from_canonical(to_canonical(p), dt) == p`` for every ``p`` in
  ``persisted_vocabulary(dt)``.
* No persisted string that means "approved" maps to anything but
  ``WorkflowStatus.APPROVED``.

Failure modes
-------------
* Non-strict: unrecognized or empty strings map to ``DRAFT`` and emit
  ``status_mapping_defaulted``.
* Strict: ``UnknownPersistedStatusError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from workflow_kernel.domain.workflow import DocumentType, WorkflowStatus
from workflow_kernel.exceptions import UnknownPersistedStatusError
from workflow_kernel.logging_config import get_logger

logger = get_logger("domain.status_mapping")

_S = WorkflowStatus

PERSISTED_TO_CANONICAL: Mapping[str, WorkflowStatus] = MappingProxyType({
    "draft": _S.DRAFT,
    "pending_approval": _S.PENDING_CHECK,
    "pending_check": _S.PENDING_CHECK,
    "checked": _S.CHECKED,
    "approved": _S.APPROVED,
    "rejected": _S.REJECTED,
    "active": _S.APPROVED,
    "completed": _S.APPROVED,
})

_IDENTITY: Mapping[WorkflowStatus, str] = MappingProxyType(
    {status: status.value for status in WorkflowStatus}
)

CANONICAL_TO_PERSISTED: Mapping[DocumentType, Mapping[WorkflowStatus, str]] = MappingProxyType({
    DocumentType.PURCHASE_ORDER_LIKE: MappingProxyType({
        _S.DRAFT: "draft",
        _S.PENDING_CHECK: "pending_approval",
        _S.CHECKED: "checked",
        _S.APPROVED: "approved",
        _S.REJECTED: "rejected",
    }),
    DocumentType.JOB_ORDER: MappingProxyType({
        _S.DRAFT: "draft",
        _S.PENDING_CHECK: "pending_check",
        _S.CHECKED: "checked",
        _S.APPROVED: "active",
        _S.REJECTED: "rejected",
    }),
    DocumentType.CASH_DISBURSEMENT: _IDENTITY,
})


def to_canonical(persisted_status: str | None, *, strict: bool = False) -> WorkflowStatus:
    """Map a persisted status string to its canonical status.

    Unrecognized input defaults to ``DRAFT`` unless ``strict`` is set.

    Raises:
        UnknownPersistedStatusError: ``strict`` and the string is unknown.
    """
    canonical = PERSISTED_TO_CANONICAL.get(persisted_status or "")
    if canonical is not None:
        return canonical
    if strict:
        raise UnknownPersistedStatusError(persisted_status)
    logger.warning(
        "status_mapping_defaulted",
        extra={
            "persisted_status": persisted_status,
            "defaulted_to": WorkflowStatus.DRAFT.value,
        },
    )
    return WorkflowStatus.DRAFT


def from_canonical(status: WorkflowStatus, document_type: DocumentType | str) -> str:
    """Map a canonical status to the string ``document_type`` persists.

    Raises:
        UnknownDocumentTypeError: ``document_type`` names no document type.
    """
    mapping = CANONICAL_TO_PERSISTED.get(DocumentType.coerce(document_type), _IDENTITY)
    return mapping[WorkflowStatus(status)]


def persisted_vocabulary(document_type: DocumentType | str) -> frozenset[str]:
    """Status strings written for ``document_type`` (the round-trip domain)."""
    mapping = CANONICAL_TO_PERSISTED.get(DocumentType.coerce(document_type), _IDENTITY)
    return frozenset(mapping.values())
