"""
Tests for DocumentService.

Covers creation at the initial status, loading, the conditional status
update (including the lost-race conflict), and per-type stamp columns.
"""

from datetime import date, timezone
from uuid import uuid4

import pytest
from sqlalchemy import update

from workflow_kernel.domain.workflow import (
    DocumentType,
    Role,
    WorkflowAction,
    WorkflowStatus,
)
from workflow_kernel.exceptions import DocumentNotFoundError, TransitionConflictError
from workflow_kernel.models.document import WorkflowDocument


def _as_utc(value):
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TestCreateDocument:

    def test_created_at_persisted_draft(self, document_service):
        document = document_service.create_document(
            DocumentType.JOB_ORDER, created_by=uuid4(), as_of=date(2026, 3, 3),
        )
        assert document.status == "draft"
        assert document.document_number == "JO-0001/CARGO/III/2026"
        assert document.document_type == "jo"

    def test_explicit_number(self, document_service):
        document = document_service.create_document(
            DocumentType.CASH_DISBURSEMENT,
            created_by=uuid4(),
            as_of=date(2026, 3, 3),
            document_number="BKK-2026-0500",
        )
        assert document.document_number == "BKK-2026-0500"

    def test_creation_logged(self, document_service, captured_logs):
        document = document_service.create_document(
            "pjo", created_by=uuid4(), as_of=date(2026, 3, 3),
        )
        (record,) = [r for r in captured_logs() if r["message"] == "document_created"]
        assert record["document_id"] == str(document.id)
        assert record["document_number"] == "0001/CARGO/III/2026"


class TestLoad:

    def test_load_by_type_and_id(self, document_service, create_document):
        document = create_document(DocumentType.JOB_ORDER)
        assert document_service.load(DocumentType.JOB_ORDER, document.id) is document

    def test_wrong_type_is_not_found(self, document_service, create_document):
        document = create_document(DocumentType.JOB_ORDER)
        with pytest.raises(DocumentNotFoundError) as exc_info:
            document_service.load(DocumentType.CASH_DISBURSEMENT, document.id)
        assert exc_info.value.document_type == "bkk"
        assert exc_info.value.code == "DOCUMENT_NOT_FOUND"

    def test_missing_id(self, document_service):
        with pytest.raises(DocumentNotFoundError):
            document_service.load(DocumentType.JOB_ORDER, uuid4())


class TestApplyTransition:

    def test_status_and_stamps_written(
        self, document_service, create_document, make_actor, clock,
    ):
        document = create_document(DocumentType.JOB_ORDER, WorkflowStatus.PENDING_CHECK)
        actor = make_actor(Role.FINANCE_MANAGER)
        at = clock.now()

        document_service.apply_transition(
            document, "pending_check", "checked", WorkflowAction.CHECK, actor, at,
        )

        assert document.status == "checked"
        assert document.checked_by_id == actor.actor_id
        assert _as_utc(document.checked_at) == _as_utc(at)
        assert document.updated_by_id == actor.actor_id

    def test_job_order_submit_stamps_submitter(
        self, document_service, create_document, make_actor, clock,
    ):
        document = create_document(DocumentType.JOB_ORDER)
        actor = make_actor(Role.ADMINISTRATION)
        document_service.apply_transition(
            document, "draft", "pending_check", WorkflowAction.SUBMIT, actor, clock.now(),
        )
        assert document.submitted_by_id == actor.actor_id

    def test_purchase_order_like_submit_has_no_submitter_stamp(
        self, document_service, create_document, make_actor, clock,
    ):
        document = create_document(DocumentType.PURCHASE_ORDER_LIKE)
        document_service.apply_transition(
            document, "draft", "pending_approval", WorkflowAction.SUBMIT,
            make_actor(Role.ADMINISTRATION), clock.now(),
        )
        assert document.status == "pending_approval"
        assert document.submitted_by_id is None

    def test_cash_disbursement_check_has_no_checker_stamp(
        self, document_service, create_document, make_actor, clock,
    ):
        document = create_document(DocumentType.CASH_DISBURSEMENT, WorkflowStatus.PENDING_CHECK)
        document_service.apply_transition(
            document, "pending_check", "checked", WorkflowAction.CHECK,
            make_actor(Role.FINANCE_MANAGER), clock.now(),
        )
        assert document.status == "checked"
        assert document.checked_by_id is None

    def test_reject_writes_reason(
        self, document_service, create_document, make_actor, clock,
    ):
        document = create_document(DocumentType.CASH_DISBURSEMENT, WorkflowStatus.CHECKED)
        document_service.apply_transition(
            document, "checked", "rejected", WorkflowAction.REJECT,
            make_actor(Role.DIRECTOR), clock.now(), comment="duplicate voucher",
        )
        assert document.status == "rejected"
        assert document.rejection_reason == "duplicate voucher"

    def test_stale_expected_status_conflicts(
        self, session, document_service, create_document, make_actor, clock,
    ):
        document = create_document(DocumentType.JOB_ORDER, WorkflowStatus.CHECKED)

        # Another request rejects the document first
        session.execute(
            update(WorkflowDocument)
            .where(WorkflowDocument.id == document.id)
            .values(status="rejected")
            .execution_options(synchronize_session=False)
        )

        with pytest.raises(TransitionConflictError) as exc_info:
            document_service.apply_transition(
                document, "checked", "active", WorkflowAction.APPROVE,
                make_actor(Role.OWNER), clock.now(),
            )
        assert exc_info.value.expected_status == "checked"

        reloaded = document_service.load(DocumentType.JOB_ORDER, document.id)
        assert reloaded.status == "rejected"
        assert reloaded.approved_by_id is None
