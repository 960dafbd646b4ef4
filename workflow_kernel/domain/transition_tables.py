"""
Transition tables (``workflow_kernel.domain.transition_tables``).

Responsibility
--------------
Holds, per ``DocumentType``, the complete list of ``TransitionRule``s and
the registry the evaluator looks them up in.

Architecture position
---------------------
**Kernel domain layer** -- static configuration data.  ZERO I/O.

Invariants enforced
-------------------
* Every table is unambiguous (enforced by ``TransitionTable``).
* All tables in one registry agree on the role-free action graph
  ``(from, action) -> to``, so a destination can be resolved before the
  document type's role sets are consulted.
* The registry is read-only (``MappingProxyType``).

Failure modes
-------------
* ``UnknownDocumentTypeError`` for a document type with no table.
* ``AmbiguousTransitionError`` when two registered tables resolve the same
  ``(from, action)`` to different destinations.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from workflow_kernel.domain.workflow import (
    DocumentType,
    Role,
    TransitionRule,
    TransitionTable,
    WorkflowAction,
    WorkflowStatus,
)
from workflow_kernel.exceptions import (
    AmbiguousTransitionError,
    UnknownDocumentTypeError,
)

_S = WorkflowStatus
_A = WorkflowAction

_CHECKERS = frozenset({Role.FINANCE_MANAGER, Role.DIRECTOR, Role.OWNER})
_APPROVERS = frozenset({Role.DIRECTOR, Role.OWNER})
_MAKERS = frozenset({
    Role.ADMINISTRATION,
    Role.FINANCE_MANAGER,
    Role.DIRECTOR,
    Role.OWNER,
})
# Finance staff raise their own disbursement vouchers
_DISBURSEMENT_MAKERS = _MAKERS | {Role.FINANCE}


def _maker_checker_approver(
    document_type: DocumentType, makers: frozenset[Role],
) -> TransitionTable:
    return TransitionTable(
        document_type=document_type,
        rules=(
            TransitionRule(_S.DRAFT, _S.PENDING_CHECK, _A.SUBMIT, makers),
            TransitionRule(_S.PENDING_CHECK, _S.CHECKED, _A.CHECK, _CHECKERS),
            TransitionRule(_S.CHECKED, _S.APPROVED, _A.APPROVE, _APPROVERS),
            TransitionRule(_S.PENDING_CHECK, _S.REJECTED, _A.REJECT, _CHECKERS),
            TransitionRule(_S.CHECKED, _S.REJECTED, _A.REJECT, _APPROVERS),
        ),
    )


PJO_TRANSITIONS = _maker_checker_approver(DocumentType.PURCHASE_ORDER_LIKE, _MAKERS)
JO_TRANSITIONS = _maker_checker_approver(DocumentType.JOB_ORDER, _MAKERS)
BKK_TRANSITIONS = _maker_checker_approver(
    DocumentType.CASH_DISBURSEMENT, _DISBURSEMENT_MAKERS,
)


class TransitionRegistry:
    """Read-only lookup of transition tables by document type.

    Contract:
        Built once from a set of tables; never written to afterwards.
    Guarantees:
        - ``table(dt)`` returns the one table registered for ``dt``.
        - ``action_graph`` is the role-free graph shared by every table.
    """

    def __init__(self, tables: Iterable[TransitionTable]):
        by_type: dict[DocumentType, TransitionTable] = {}
        shared: dict[tuple[WorkflowStatus, WorkflowAction], WorkflowStatus] = {}
        for table in tables:
            by_type[table.document_type] = table
            for (from_status, action), to_status in table.action_graph.items():
                existing = shared.get((from_status, action))
                if existing is not None and existing != to_status:
                    raise AmbiguousTransitionError(
                        table_name="registry",
                        from_status=from_status.value,
                        action=action.value,
                        destinations=(existing.value, to_status.value),
                    )
                shared[(from_status, action)] = to_status
        self._tables: Mapping[DocumentType, TransitionTable] = MappingProxyType(by_type)
        self._action_graph: Mapping[
            tuple[WorkflowStatus, WorkflowAction], WorkflowStatus
        ] = MappingProxyType(shared)

    def table(self, document_type: DocumentType | str) -> TransitionTable:
        try:
            return self._tables[DocumentType.coerce(document_type)]
        except KeyError:
            raise UnknownDocumentTypeError(str(document_type)) from None

    @property
    def document_types(self) -> frozenset[DocumentType]:
        return frozenset(self._tables)

    @property
    def action_graph(self) -> Mapping[tuple[WorkflowStatus, WorkflowAction], WorkflowStatus]:
        return self._action_graph

    def __contains__(self, document_type: object) -> bool:
        try:
            return DocumentType(document_type) in self._tables
        except ValueError:
            return False


DEFAULT_REGISTRY = TransitionRegistry((PJO_TRANSITIONS, JO_TRANSITIONS, BKK_TRANSITIONS))


def get_transition_table(
    document_type: DocumentType | str,
    registry: TransitionRegistry | None = None,
) -> TransitionTable:
    """Return the transition table for ``document_type``.

    Raises:
        UnknownDocumentTypeError: no table registered for the type.
    """
    return (registry or DEFAULT_REGISTRY).table(document_type)
