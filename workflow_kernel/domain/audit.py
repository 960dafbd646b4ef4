"""
Audit record construction (``workflow_kernel.domain.audit``).

Responsibility
--------------
Builds the immutable record that describes one accepted workflow
transition.  Writing it is the job of an ``AuditRecorder``
(``workflow_kernel.services.audit_recorder``); this module only decides
what the record says.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  The timestamp
is passed in by the caller.

Invariants enforced
-------------------
* One record per accepted transition; records are frozen.
* The provenance marker is fixed: the engine runs behind a boundary that
  never sees the client's network address.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from workflow_kernel.domain.workflow import (
    ActorRef,
    DocumentType,
    WorkflowAction,
    WorkflowStatus,
)

PROVENANCE_IP_ADDRESS = "system"
PROVENANCE_USER_AGENT = "edge-function"

_ACTION_VERBS = {
    WorkflowAction.SUBMIT: "Submitted",
    WorkflowAction.CHECK: "Checked",
    WorkflowAction.APPROVE: "Approved",
    WorkflowAction.REJECT: "Rejected",
}


@dataclass(frozen=True)
class AuditRecord:
    """Append-only description of one accepted transition."""

    actor_id: UUID
    actor_name: str
    actor_email: str
    actor_role: str
    action: WorkflowAction
    module: str
    record_id: UUID
    record_type: str
    record_number: str
    status_from: WorkflowStatus
    status_to: WorkflowStatus
    occurred_at: datetime
    summary: str | None = None
    comment: str | None = None
    ip_address: str = PROVENANCE_IP_ADDRESS
    user_agent: str = PROVENANCE_USER_AGENT


class AuditRecorder(Protocol):
    """Collaborator that appends audit records to a store it owns."""

    def record(self, record: AuditRecord) -> None:
        ...


def summarize_transition(
    action: WorkflowAction,
    record_type: str,
    record_number: str,
    status_from: WorkflowStatus,
    status_to: WorkflowStatus,
    comment: str | None = None,
) -> str:
    """Human-readable one-liner, e.g. ``Approved JO JO-0007/CARGO/X/2026 (checked -> approved)``."""
    text = (
        f"{_ACTION_VERBS[action]} {record_type} {record_number} "
        f"({status_from.value} -> {status_to.value})"
    )
    if comment:
        text = f"{text}: {comment}"
    return text


def build_audit_record(
    *,
    actor: ActorRef,
    document_type: DocumentType,
    record_id: UUID,
    record_number: str,
    action: WorkflowAction,
    status_from: WorkflowStatus,
    status_to: WorkflowStatus,
    occurred_at: datetime,
    comment: str | None = None,
) -> AuditRecord:
    record_type = document_type.record_type
    return AuditRecord(
        actor_id=actor.actor_id,
        actor_name=actor.display_name,
        actor_email=actor.email,
        actor_role=str(getattr(actor.role, "value", actor.role)),
        action=action,
        module=document_type.value,
        record_id=record_id,
        record_type=record_type,
        record_number=record_number or str(record_id),
        status_from=status_from,
        status_to=status_to,
        occurred_at=occurred_at,
        summary=summarize_transition(
            action, record_type, record_number or str(record_id),
            status_from, status_to, comment,
        ),
        comment=comment,
    )
