"""
Canonical workflow types (``workflow_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for the maker-checker-approver state machine shared by
every document type: the canonical status and action vocabularies, actor
roles, transition rules, the per-document transition table, and the
result types the evaluator and executor return.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``services/``, ``selectors/``, or outer layers.

Invariants enforced
-------------------
* A ``TransitionTable`` never holds two rules with the same
  ``(from_status, action)`` and different ``to_status``; construction
  raises ``AmbiguousTransitionError``.
* Terminal statuses (``APPROVED``, ``REJECTED``) have no outgoing rules
  in any table built from this module's defaults.
* Rules and tables are frozen; nothing mutates them after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from workflow_kernel.exceptions import AmbiguousTransitionError, UnknownDocumentTypeError


class DocumentType(str, Enum):
    """Document types that own a transition table."""

    PURCHASE_ORDER_LIKE = "pjo"
    JOB_ORDER = "jo"
    CASH_DISBURSEMENT = "bkk"

    @classmethod
    def coerce(cls, value: DocumentType | str) -> DocumentType:
        """Enum member for ``value``.

        Raises:
            UnknownDocumentTypeError: ``value`` names no document type.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownDocumentTypeError(str(value)) from None

    @property
    def record_type(self) -> str:
        """Upper-case tag used for audit records (``PJO``, ``JO``, ``BKK``)."""
        return self.value.upper()


class WorkflowStatus(str, Enum):
    """The five canonical workflow states."""

    DRAFT = "draft"
    PENDING_CHECK = "pending_check"
    CHECKED = "checked"
    APPROVED = "approved"
    REJECTED = "rejected"


TERMINAL_STATUSES: frozenset[WorkflowStatus] = frozenset({
    WorkflowStatus.APPROVED,
    WorkflowStatus.REJECTED,
})

INITIAL_STATUS = WorkflowStatus.DRAFT


class WorkflowAction(str, Enum):
    """Intent stated by the caller; the table resolves it to a destination."""

    SUBMIT = "submit"
    CHECK = "check"
    APPROVE = "approve"
    REJECT = "reject"


class Role(str, Enum):
    """Actor roles.  Assigned outside the engine and fixed per evaluation."""

    OWNER = "owner"
    DIRECTOR = "director"
    SYSADMIN = "sysadmin"
    MARKETING_MANAGER = "marketing_manager"
    FINANCE_MANAGER = "finance_manager"
    OPERATIONS_MANAGER = "operations_manager"
    ADMINISTRATION = "administration"
    FINANCE = "finance"
    MARKETING = "marketing"
    OPS = "ops"
    ENGINEER = "engineer"
    HR = "hr"
    HSE = "hse"
    AGENCY = "agency"
    CUSTOMS = "customs"


@dataclass(frozen=True)
class TransitionRule:
    """A legal move between two canonical statuses.

    Contract: frozen.  ``allowed_roles`` is the complete set of roles that
    may take ``action`` from ``from_status``; an empty set means nobody can.
    """

    from_status: WorkflowStatus
    to_status: WorkflowStatus
    action: WorkflowAction
    allowed_roles: frozenset[Role]

    def permits(self, role: Role | str) -> bool:
        # str-mixin enums hash by member name, so normalize before lookup
        try:
            return Role(role) in self.allowed_roles
        except ValueError:
            return False


@dataclass(frozen=True)
class TransitionTable:
    """The complete and exclusive rule list for one document type.

    Contract: frozen; built once and only read afterwards.
    Guarantees: ``(from_status, action)`` maps to at most one destination.

    Raises:
        AmbiguousTransitionError: two rules share ``(from_status, action)``
            with different ``to_status``.
    """

    document_type: DocumentType
    rules: tuple[TransitionRule, ...]
    _targets: dict[tuple[WorkflowStatus, WorkflowAction], WorkflowStatus] = field(
        init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        targets: dict[tuple[WorkflowStatus, WorkflowAction], WorkflowStatus] = {}
        for rule in self.rules:
            key = (rule.from_status, rule.action)
            existing = targets.get(key)
            if existing is not None and existing != rule.to_status:
                raise AmbiguousTransitionError(
                    table_name=self.document_type.value,
                    from_status=rule.from_status.value,
                    action=rule.action.value,
                    destinations=(existing.value, rule.to_status.value),
                )
            targets[key] = rule.to_status
        object.__setattr__(self, "_targets", targets)

    def destination(
        self, from_status: WorkflowStatus, action: WorkflowAction,
    ) -> WorkflowStatus | None:
        """Unique destination for ``action`` from ``from_status``, if any."""
        return self._targets.get((WorkflowStatus(from_status), WorkflowAction(action)))

    def rules_from(self, from_status: WorkflowStatus) -> tuple[TransitionRule, ...]:
        return tuple(r for r in self.rules if r.from_status == from_status)

    @property
    def action_graph(self) -> dict[tuple[WorkflowStatus, WorkflowAction], WorkflowStatus]:
        """Role-free ``(from, action) -> to`` mapping (a copy)."""
        return dict(self._targets)


# =========================================================================
# Evaluation results
# =========================================================================


class TransitionOutcome(str, Enum):
    """Why a transition was or was not allowed."""

    ACCEPTED = "accepted"
    # Structural: no rule for this action from this status
    NO_TRANSITION = "no_transition"
    # Authorization: the rule exists but the role is not listed
    NOT_PERMITTED = "not_permitted"


@dataclass(frozen=True)
class TransitionDecision:
    """Result of evaluating a requested action.  Pure data, no side effects."""

    document_type: DocumentType
    action: WorkflowAction
    role: Role | str
    current_status: WorkflowStatus
    outcome: TransitionOutcome
    new_status: WorkflowStatus | None = None
    new_persisted_status: str | None = None
    reason: str = ""

    @property
    def accepted(self) -> bool:
        return self.outcome == TransitionOutcome.ACCEPTED


@dataclass(frozen=True)
class ActorRef:
    """The authenticated actor requesting a transition."""

    actor_id: UUID
    role: Role | str
    display_name: str = ""
    email: str = ""


@dataclass(frozen=True)
class TransitionResult:
    """Result of executing a workflow transition against a stored document."""

    success: bool
    outcome: TransitionOutcome
    document_id: UUID
    document_type: DocumentType
    previous_status: WorkflowStatus | None = None
    new_status: WorkflowStatus | None = None
    new_persisted_status: str | None = None
    audit_recorded: bool = False
    reason: str = ""


@dataclass(frozen=True)
class WorkflowStatusView:
    """Current workflow position of a document as seen by one role."""

    document_id: UUID
    document_type: DocumentType
    document_number: str
    current_status: WorkflowStatus
    available_actions: frozenset[WorkflowAction]
    submitted_by: UUID | None = None
    checked_by: UUID | None = None
    checked_at: datetime | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    rejected_by: UUID | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None


@dataclass(frozen=True)
class PendingDocument:
    """A document waiting on an action the given role may take."""

    document_id: UUID
    document_number: str
    status: WorkflowStatus
    created_at: datetime | None
    available_actions: frozenset[WorkflowAction]
