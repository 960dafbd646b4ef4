"""
Pure domain layer.

This module contains the workflow vocabulary, the static transition
tables, status translation and audit record construction, with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (timestamps are passed in)

All domain objects are immutable and deterministic.
"""

from workflow_kernel.domain.audit import (
    PROVENANCE_IP_ADDRESS,
    PROVENANCE_USER_AGENT,
    AuditRecord,
    AuditRecorder,
    build_audit_record,
)
from workflow_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from workflow_kernel.domain.status_mapping import (
    from_canonical,
    persisted_vocabulary,
    to_canonical,
)
from workflow_kernel.domain.transition_tables import (
    DEFAULT_REGISTRY,
    TransitionRegistry,
    get_transition_table,
)
from workflow_kernel.domain.workflow import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    ActorRef,
    DocumentType,
    PendingDocument,
    Role,
    TransitionDecision,
    TransitionOutcome,
    TransitionResult,
    TransitionRule,
    TransitionTable,
    WorkflowAction,
    WorkflowStatus,
    WorkflowStatusView,
)

__all__ = [
    # Vocabulary
    "DocumentType",
    "WorkflowStatus",
    "WorkflowAction",
    "Role",
    "INITIAL_STATUS",
    "TERMINAL_STATUSES",
    # Tables
    "TransitionRule",
    "TransitionTable",
    "TransitionRegistry",
    "DEFAULT_REGISTRY",
    "get_transition_table",
    # Status mapping
    "to_canonical",
    "from_canonical",
    "persisted_vocabulary",
    # Results
    "ActorRef",
    "TransitionOutcome",
    "TransitionDecision",
    "TransitionResult",
    "WorkflowStatusView",
    "PendingDocument",
    # Audit
    "AuditRecord",
    "AuditRecorder",
    "build_audit_record",
    "PROVENANCE_IP_ADDRESS",
    "PROVENANCE_USER_AGENT",
    # Time
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
