"""
Tests for the canonical workflow types (``workflow_kernel.domain.workflow``).

Covers the vocabularies, the frozen TransitionRule / TransitionTable value
objects, and the result types returned by the evaluator and executor.
"""

from dataclasses import FrozenInstanceError
from uuid import uuid4

import pytest

from workflow_kernel.domain.workflow import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    ActorRef,
    DocumentType,
    Role,
    TransitionDecision,
    TransitionOutcome,
    TransitionRule,
    TransitionTable,
    WorkflowAction,
    WorkflowStatus,
)
from workflow_kernel.exceptions import AmbiguousTransitionError

_S = WorkflowStatus
_A = WorkflowAction


class TestVocabulary:

    def test_five_canonical_statuses(self):
        assert {s.value for s in WorkflowStatus} == {
            "draft", "pending_check", "checked", "approved", "rejected",
        }

    def test_four_actions(self):
        assert {a.value for a in WorkflowAction} == {"submit", "check", "approve", "reject"}

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == frozenset({_S.APPROVED, _S.REJECTED})
        assert INITIAL_STATUS == _S.DRAFT

    def test_full_role_enumeration(self):
        assert len(Role) == 15
        assert Role("ops") is Role.OPS
        assert Role("finance_manager") is Role.FINANCE_MANAGER

    def test_document_type_record_type(self):
        assert DocumentType.PURCHASE_ORDER_LIKE.record_type == "PJO"
        assert DocumentType.JOB_ORDER.record_type == "JO"
        assert DocumentType.CASH_DISBURSEMENT.record_type == "BKK"


class TestTransitionRule:

    def _rule(self) -> TransitionRule:
        return TransitionRule(
            _S.CHECKED, _S.APPROVED, _A.APPROVE, frozenset({Role.DIRECTOR, Role.OWNER}),
        )

    def test_permits_listed_role(self):
        assert self._rule().permits(Role.OWNER)

    def test_permits_plain_string_role(self):
        assert self._rule().permits("director")

    def test_rejects_unlisted_role(self):
        assert not self._rule().permits(Role.FINANCE_MANAGER)

    def test_rejects_unknown_role_string(self):
        assert not self._rule().permits("superuser")

    def test_empty_role_set_permits_nobody(self):
        rule = TransitionRule(_S.DRAFT, _S.PENDING_CHECK, _A.SUBMIT, frozenset())
        assert not any(rule.permits(r) for r in Role)

    def test_frozen(self):
        rule = self._rule()
        with pytest.raises(FrozenInstanceError):
            rule.action = _A.REJECT


class TestTransitionTable:

    def test_destination_lookup(self):
        table = TransitionTable(
            DocumentType.JOB_ORDER,
            (TransitionRule(_S.DRAFT, _S.PENDING_CHECK, _A.SUBMIT, frozenset({Role.OWNER})),),
        )
        assert table.destination(_S.DRAFT, _A.SUBMIT) == _S.PENDING_CHECK
        assert table.destination("draft", "submit") == _S.PENDING_CHECK
        assert table.destination(_S.DRAFT, _A.APPROVE) is None

    def test_ambiguous_rules_rejected_at_construction(self):
        with pytest.raises(AmbiguousTransitionError) as exc_info:
            TransitionTable(
                DocumentType.JOB_ORDER,
                (
                    TransitionRule(_S.CHECKED, _S.APPROVED, _A.APPROVE, frozenset({Role.OWNER})),
                    TransitionRule(_S.CHECKED, _S.REJECTED, _A.APPROVE, frozenset({Role.OWNER})),
                ),
            )
        assert exc_info.value.code == "AMBIGUOUS_TRANSITION"
        assert exc_info.value.from_status == "checked"
        assert exc_info.value.action == "approve"

    def test_same_destination_split_across_rules_is_allowed(self):
        table = TransitionTable(
            DocumentType.JOB_ORDER,
            (
                TransitionRule(_S.CHECKED, _S.APPROVED, _A.APPROVE, frozenset({Role.OWNER})),
                TransitionRule(_S.CHECKED, _S.APPROVED, _A.APPROVE, frozenset({Role.DIRECTOR})),
            ),
        )
        assert table.destination(_S.CHECKED, _A.APPROVE) == _S.APPROVED

    def test_rules_from(self):
        rules = (
            TransitionRule(_S.PENDING_CHECK, _S.CHECKED, _A.CHECK, frozenset({Role.OWNER})),
            TransitionRule(_S.PENDING_CHECK, _S.REJECTED, _A.REJECT, frozenset({Role.OWNER})),
            TransitionRule(_S.CHECKED, _S.APPROVED, _A.APPROVE, frozenset({Role.OWNER})),
        )
        table = TransitionTable(DocumentType.JOB_ORDER, rules)
        assert {r.action for r in table.rules_from(_S.PENDING_CHECK)} == {_A.CHECK, _A.REJECT}

    def test_action_graph_is_a_copy(self):
        table = TransitionTable(
            DocumentType.JOB_ORDER,
            (TransitionRule(_S.DRAFT, _S.PENDING_CHECK, _A.SUBMIT, frozenset({Role.OWNER})),),
        )
        graph = table.action_graph
        graph.clear()
        assert table.destination(_S.DRAFT, _A.SUBMIT) == _S.PENDING_CHECK


class TestResultTypes:

    def test_decision_accepted_property(self):
        accepted = TransitionDecision(
            DocumentType.JOB_ORDER, _A.SUBMIT, Role.OWNER, _S.DRAFT,
            TransitionOutcome.ACCEPTED, _S.PENDING_CHECK, "pending_check",
        )
        refused = TransitionDecision(
            DocumentType.JOB_ORDER, _A.APPROVE, Role.OWNER, _S.DRAFT,
            TransitionOutcome.NO_TRANSITION,
        )
        assert accepted.accepted
        assert not refused.accepted

    def test_actor_ref_frozen(self):
        actor = ActorRef(actor_id=uuid4(), role=Role.OWNER)
        with pytest.raises(FrozenInstanceError):
            actor.role = Role.OPS
