"""
workflow_engines.transitions -- Pure transition evaluation engine.

Responsibility:
    Decide whether a requested workflow action is legal for a role, which
    status it leads to, and which actions a role may take in a state.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import workflow_kernel/domain/ types.

Invariants enforced:
    - Destination lookup (``target_status``) is role-independent; role
      checks (``can_transition``) are a separate step, so callers can tell
      "not possible here" apart from "not allowed for you".
    - Terminal statuses are not special-cased: they have no outgoing rules,
      so every lookup from them finds nothing.
    - Purity: no clock access, no I/O, no database.

Failure modes:
    - Returns ``False`` / ``None`` / empty sets for every business "no".
    - UnknownDocumentTypeError when the document type has no table
      (a configuration error, not an outcome).
"""

from __future__ import annotations

from workflow_kernel.domain.status_mapping import from_canonical, to_canonical
from workflow_kernel.domain.transition_tables import (
    DEFAULT_REGISTRY,
    TransitionRegistry,
)
from workflow_kernel.domain.workflow import (
    DocumentType,
    Role,
    TransitionDecision,
    TransitionOutcome,
    WorkflowAction,
    WorkflowStatus,
)


def can_transition(
    document_type: DocumentType | str,
    from_status: WorkflowStatus,
    to_status: WorkflowStatus,
    role: Role | str,
    registry: TransitionRegistry | None = None,
) -> bool:
    """True iff a rule moves ``from_status`` to ``to_status`` and lists ``role``.

    Args:
        document_type: Selects the transition table.
        from_status: Current canonical status.
        to_status: Requested canonical destination.
        role: The actor's role.
        registry: Tables to consult (defaults to the built-in tables).
    """
    table = (registry or DEFAULT_REGISTRY).table(document_type)
    return any(
        rule.to_status == to_status and rule.permits(role)
        for rule in table.rules_from(from_status)
    )


def available_actions(
    document_type: DocumentType | str,
    current_status: WorkflowStatus,
    role: Role | str,
    registry: TransitionRegistry | None = None,
) -> frozenset[WorkflowAction]:
    """Every action ``role`` may take from ``current_status``.

    Used to decide which action buttons to present.  Never includes an
    action whose rules list only other roles.
    """
    table = (registry or DEFAULT_REGISTRY).table(document_type)
    return frozenset(
        rule.action
        for rule in table.rules_from(current_status)
        if rule.permits(role)
    )


def target_status(
    action: WorkflowAction,
    current_status: WorkflowStatus,
    document_type: DocumentType | str | None = None,
    registry: TransitionRegistry | None = None,
) -> WorkflowStatus | None:
    """Unique destination for ``action`` from ``current_status``, ignoring roles.

    Without ``document_type`` the action graph shared by all registered
    tables is used (the registry guarantees they agree).  Returns ``None``
    when no rule matches, e.g. any action from ``APPROVED``.
    """
    registry = registry or DEFAULT_REGISTRY
    if document_type is None:
        return registry.action_graph.get(
            (WorkflowStatus(current_status), WorkflowAction(action))
        )
    return registry.table(document_type).destination(current_status, action)


def evaluate_transition(
    document_type: DocumentType | str,
    current_status: WorkflowStatus,
    action: WorkflowAction,
    role: Role | str,
    registry: TransitionRegistry | None = None,
) -> TransitionDecision:
    """Resolve intent to a destination, then check the role.

    Returns a ``TransitionDecision`` whose ``outcome`` is ``ACCEPTED``,
    ``NO_TRANSITION`` (structural) or ``NOT_PERMITTED`` (authorization).
    """
    document_type = DocumentType.coerce(document_type)
    current_status = WorkflowStatus(current_status)
    action = WorkflowAction(action)
    destination = target_status(action, current_status, document_type, registry)

    if destination is None:
        return TransitionDecision(
            document_type=document_type,
            action=action,
            role=role,
            current_status=current_status,
            outcome=TransitionOutcome.NO_TRANSITION,
            reason=f"Cannot {action.value} from status '{current_status.value}'",
        )

    if not can_transition(document_type, current_status, destination, role, registry):
        return TransitionDecision(
            document_type=document_type,
            action=action,
            role=role,
            current_status=current_status,
            outcome=TransitionOutcome.NOT_PERMITTED,
            new_status=destination,
            reason=f"Role '{_role_name(role)}' cannot {action.value} this document",
        )

    return TransitionDecision(
        document_type=document_type,
        action=action,
        role=role,
        current_status=current_status,
        outcome=TransitionOutcome.ACCEPTED,
        new_status=destination,
        new_persisted_status=from_canonical(destination, document_type),
        reason=f"{action.value}: {current_status.value} -> {destination.value}",
    )


def resolve_transition(
    document_type: DocumentType | str,
    persisted_status: str | None,
    action: WorkflowAction,
    role: Role | str,
    *,
    strict: bool = False,
    registry: TransitionRegistry | None = None,
) -> TransitionDecision:
    """Evaluate a request expressed in the document's persisted vocabulary.

    Raises:
        UnknownPersistedStatusError: ``strict`` and the status is unknown.
    """
    current = to_canonical(persisted_status, strict=strict)
    return evaluate_transition(document_type, current, action, role, registry)


def actionable_statuses(
    document_type: DocumentType | str,
    role: Role | str,
    registry: TransitionRegistry | None = None,
) -> frozenset[WorkflowStatus]:
    """Statuses from which ``role`` has at least one action."""
    table = (registry or DEFAULT_REGISTRY).table(document_type)
    return frozenset(rule.from_status for rule in table.rules if rule.permits(role))


def _role_name(role: Role | str) -> str:
    return role.value if isinstance(role, Role) else str(role)
