"""
Tests for the built-in transition tables and the registry.

Invariants tested:
- Every (from, action) pair in every table has exactly one destination.
- Terminal statuses have no outgoing rules in any table.
- Tables in one registry agree on the role-free action graph.
- Role sets match the documented maker / checker / approver split.
"""

import pytest

from workflow_kernel.domain.transition_tables import (
    BKK_TRANSITIONS,
    DEFAULT_REGISTRY,
    JO_TRANSITIONS,
    PJO_TRANSITIONS,
    TransitionRegistry,
    get_transition_table,
)
from workflow_kernel.domain.workflow import (
    TERMINAL_STATUSES,
    DocumentType,
    Role,
    TransitionRule,
    TransitionTable,
    WorkflowAction,
    WorkflowStatus,
)
from workflow_kernel.exceptions import AmbiguousTransitionError, UnknownDocumentTypeError

_S = WorkflowStatus
_A = WorkflowAction

ALL_TABLES = (PJO_TRANSITIONS, JO_TRANSITIONS, BKK_TRANSITIONS)


class TestTableShape:

    @pytest.mark.parametrize("table", ALL_TABLES, ids=lambda t: t.document_type.value)
    def test_no_ambiguous_rule(self, table):
        destinations: dict[tuple, set] = {}
        for rule in table.rules:
            destinations.setdefault((rule.from_status, rule.action), set()).add(rule.to_status)
        assert all(len(targets) == 1 for targets in destinations.values())

    @pytest.mark.parametrize("table", ALL_TABLES, ids=lambda t: t.document_type.value)
    def test_terminal_states_have_no_outgoing_rules(self, table):
        for status in TERMINAL_STATUSES:
            assert table.rules_from(status) == ()

    @pytest.mark.parametrize("table", ALL_TABLES, ids=lambda t: t.document_type.value)
    def test_five_rules_per_table(self, table):
        edges = {(r.from_status, r.action, r.to_status) for r in table.rules}
        assert edges == {
            (_S.DRAFT, _A.SUBMIT, _S.PENDING_CHECK),
            (_S.PENDING_CHECK, _A.CHECK, _S.CHECKED),
            (_S.CHECKED, _A.APPROVE, _S.APPROVED),
            (_S.PENDING_CHECK, _A.REJECT, _S.REJECTED),
            (_S.CHECKED, _A.REJECT, _S.REJECTED),
        }


class TestRoleSets:

    def _roles(self, table, from_status, action):
        (rule,) = [
            r for r in table.rules if r.from_status == from_status and r.action == action
        ]
        return rule.allowed_roles

    @pytest.mark.parametrize("table", (PJO_TRANSITIONS, JO_TRANSITIONS))
    def test_makers(self, table):
        assert self._roles(table, _S.DRAFT, _A.SUBMIT) == {
            Role.ADMINISTRATION, Role.FINANCE_MANAGER, Role.DIRECTOR, Role.OWNER,
        }

    def test_finance_staff_may_submit_disbursements(self):
        makers = self._roles(BKK_TRANSITIONS, _S.DRAFT, _A.SUBMIT)
        assert Role.FINANCE in makers
        assert Role.FINANCE not in self._roles(JO_TRANSITIONS, _S.DRAFT, _A.SUBMIT)

    @pytest.mark.parametrize("table", ALL_TABLES, ids=lambda t: t.document_type.value)
    def test_checkers_and_approvers(self, table):
        checkers = {Role.FINANCE_MANAGER, Role.DIRECTOR, Role.OWNER}
        approvers = {Role.DIRECTOR, Role.OWNER}
        assert self._roles(table, _S.PENDING_CHECK, _A.CHECK) == checkers
        assert self._roles(table, _S.PENDING_CHECK, _A.REJECT) == checkers
        assert self._roles(table, _S.CHECKED, _A.APPROVE) == approvers
        assert self._roles(table, _S.CHECKED, _A.REJECT) == approvers


class TestRegistry:

    def test_lookup_by_enum_and_string(self):
        assert get_transition_table(DocumentType.JOB_ORDER) is JO_TRANSITIONS
        assert get_transition_table("bkk") is BKK_TRANSITIONS

    def test_unknown_document_type_raises(self):
        with pytest.raises(UnknownDocumentTypeError) as exc_info:
            get_transition_table("invoice")
        assert exc_info.value.document_type == "invoice"

    def test_registry_without_a_type_raises_for_it(self):
        registry = TransitionRegistry((JO_TRANSITIONS,))
        assert "jo" in registry
        assert DocumentType.CASH_DISBURSEMENT not in registry
        with pytest.raises(UnknownDocumentTypeError):
            get_transition_table(DocumentType.CASH_DISBURSEMENT, registry)

    def test_default_registry_covers_all_types(self):
        assert DEFAULT_REGISTRY.document_types == frozenset(DocumentType)

    def test_shared_action_graph(self):
        graph = DEFAULT_REGISTRY.action_graph
        assert graph[(_S.CHECKED, _A.APPROVE)] == _S.APPROVED
        assert (_S.DRAFT, _A.REJECT) not in graph

    def test_disagreeing_tables_rejected(self):
        odd = TransitionTable(
            DocumentType.CASH_DISBURSEMENT,
            (TransitionRule(_S.DRAFT, _S.CHECKED, _A.SUBMIT, frozenset({Role.OWNER})),),
        )
        with pytest.raises(AmbiguousTransitionError) as exc_info:
            TransitionRegistry((JO_TRANSITIONS, odd))
        assert exc_info.value.table_name == "registry"

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_REGISTRY.action_graph[(_S.DRAFT, _A.APPROVE)] = _S.APPROVED
